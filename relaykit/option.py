"""Start-up option handlers, tried in order of decreasing priority."""

from __future__ import annotations

import abc

from relaykit.errors import ProxyError


class Handler(abc.ABC):
    """A way of starting the program, selected from the command line."""

    @abc.abstractmethod
    def name(self) -> str:
        """Unique name of the handler."""

    @abc.abstractmethod
    def handle(self) -> None:
        """Run the handler; raise to let the next handler try."""

    @abc.abstractmethod
    def priority(self) -> int:
        """Handlers with higher priority are tried first."""


_handlers: dict[str, Handler] = {}


def register_handler(handler: Handler) -> None:
    """Register ``handler``, replacing any handler of the same name."""
    _handlers[handler.name()] = handler


def pop_option_handler() -> Handler:
    """Remove and return the handler with the highest priority."""
    if not _handlers:
        raise ProxyError("no option left")
    best = max(_handlers.values(), key=lambda handler: handler.priority())
    del _handlers[best.name()]
    return best