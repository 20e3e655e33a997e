"""Registry of API services started alongside a proxy."""

from __future__ import annotations

from typing import Any, Callable

from relaykit import log

Handler = Callable[[Any, Any], Any]

_handlers: dict[str, Handler] = {}


def register_handler(name: str, handler: Handler) -> None:
    """Register ``handler`` as the service called ``name``."""
    _handlers[name] = handler


def run_service(ctx: Any, name: str, auth: Any) -> Any:
    """Run service ``name`` with ``ctx`` and ``auth``; do nothing if it is unknown."""
    handler = _handlers.get(name)
    if handler is None:
        log.debug("api handler not found", name)
        return None
    log.debug("api handler found", name)
    return handler(ctx, auth)