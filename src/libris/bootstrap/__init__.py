"""Startup wiring for LIBRIS.

Entry points call `bootstrap` and receive an `AppContainer`; they never
build engines, units of work or handlers themselves. Nothing under
`libris.domain`, `libris.interfaces`, `libris.service_layer` or
`libris.adapters` may import this package.
"""

from .bootstrap import AppContainer, bootstrap, build_message_bus

__all__ = ["AppContainer", "bootstrap", "build_message_bus"]
