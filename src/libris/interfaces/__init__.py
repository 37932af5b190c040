"""Interfaces (application boundary) for LIBRIS.

Defines framework-free application contracts: repository ABCs, the unit of
work, and the clock. Business rules stay out of this package.

Dependency rule: may import `libris.domain` models only. It may be imported by
`libris.service_layer`, `libris.adapters`, and `libris.bootstrap`.
"""
