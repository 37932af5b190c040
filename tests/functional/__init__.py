"""Functional tests.

Drive the ``libris`` command line as a librarian would and check what they
see: output, prompts and exit codes.
"""
