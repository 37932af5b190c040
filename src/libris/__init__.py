"""LIBRIS

A library circulation engine. It tracks books, members and loans, and
enforces availability, loan period, overdue fine and suspension rules
atomically against a relational store.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
