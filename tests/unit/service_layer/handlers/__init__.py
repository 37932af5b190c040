"""Handler unit tests over the in-memory unit of work."""
