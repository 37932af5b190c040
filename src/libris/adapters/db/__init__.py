"""Database plumbing: engine factory, column types, schema and migrations."""
