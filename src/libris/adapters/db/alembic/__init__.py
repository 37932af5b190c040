"""Alembic migration scripts for LIBRIS (forward-only)."""
