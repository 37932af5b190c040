"""Repository adapters: SQLAlchemy-backed and in-memory."""
