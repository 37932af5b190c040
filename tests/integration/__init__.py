"""Integration tests.

Run the SQLAlchemy adapters, Alembic migrations and whole circulation flows
against a migrated SQLite file and, when Docker is up, Postgres 17.
"""
