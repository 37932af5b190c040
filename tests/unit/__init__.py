"""Unit tests.

Domain policies, the managers and the command handlers, run against the
in-memory unit of work with a fixed clock. No database, no network.
"""
