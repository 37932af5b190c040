"""Adapters (infrastructure) for LIBRIS.

Provide concrete implementations of the interfaces (SQLAlchemy and in-memory
repositories, unit of work, clocks), plus persistence mapping and related
wiring (engines, metadata, migrations).

Dependency rule: may import `libris.domain` and `libris.interfaces`; neither
may import this package.
"""
