"""Service layer unit tests."""
