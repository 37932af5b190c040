"""Domain layer for LIBRIS.

Contains business rules: read/write models for books, members, loans and
fines, the circulation policies (loan period, fine rate, limits, book state
machine), and the error taxonomy. This package is deliberately
technology-agnostic.

Dependency rule: do not import from `libris.adapters` or `libris.entrypoints`.
"""
