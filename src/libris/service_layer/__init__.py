"""Service layer for LIBRIS.

Implements application use-cases: the book lifecycle and member eligibility
managers, the fine ledger, and the command handlers that run borrow/return
inside one unit of work.

Dependency rule: may import `libris.domain` and `libris.interfaces`, but not
`libris.adapters` or `libris.entrypoints`.
"""
