"""Entrypoints (inbound adapters) for LIBRIS.

Expose the application to the outside world. Parse inputs, build commands,
hand them to the message bus, and present results.

Dependency rule: may import `libris.bootstrap` and `libris.service_layer`;
avoid importing `libris.adapters` directly.
"""
