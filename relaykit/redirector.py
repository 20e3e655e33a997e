"""Forwards inbound connections to another address in background threads."""

from __future__ import annotations

import queue
import socket
import threading
from dataclasses import dataclass
from typing import Any, Callable

from relaykit import log
from relaykit.errors import ProxyError

Dial = Callable[[Any], socket.socket]

_POLL_INTERVAL = 0.1
_QUEUE_SIZE = 64
_CHUNK = 32 * 1024


def _default_dial(address: Any) -> socket.socket:
    return socket.create_connection(address)


@dataclass
class Redirection:
    """An inbound connection and the address it should be relayed to."""

    redirect_to: Any = None
    inbound_conn: socket.socket | None = None
    dial: Dial | None = None


def _shutdown(conn: socket.socket) -> None:
    try:
        conn.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    conn.close()


def _peer(conn: socket.socket) -> Any:
    try:
        return conn.getpeername()
    except OSError:
        return "<unknown>"


def _copy(src: socket.socket, dst: socket.socket, done: "queue.Queue[BaseException | None]") -> None:
    try:
        while True:
            chunk = src.recv(_CHUNK)
            if not chunk:
                break
            dst.sendall(chunk)
    except OSError as exc:
        done.put(exc)
        return
    done.put(None)


class Redirector:
    """Accepts redirection requests and relays each in its own thread."""

    def __init__(self) -> None:
        self._closed = threading.Event()
        self._requests: "queue.Queue[Redirection]" = queue.Queue(maxsize=_QUEUE_SIZE)
        self._worker = threading.Thread(target=self._run, daemon=True)
        self._worker.start()

    def redirect(self, redirection: Redirection) -> bool:
        """Queue a redirection; return False if the redirector is closed."""
        while not self._closed.is_set():
            try:
                self._requests.put(redirection, timeout=_POLL_INTERVAL)
            except queue.Full:
                continue
            log.debug("redirect request")
            return True
        log.debug("exiting")
        return False

    def close(self) -> None:
        """Stop accepting requests and end running relays."""
        self._closed.set()
        self._worker.join()

    def __enter__(self) -> "Redirector":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self) -> None:
        while not self._closed.is_set():
            try:
                redirection = self._requests.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            threading.Thread(target=self._handle, args=(redirection,), daemon=True).start()
        log.debug("shutting down redirector")

    def _handle(self, redirection: Redirection) -> None:
        inbound = redirection.inbound_conn
        if inbound is None:
            log.error("nil inbound conn")
            return
        try:
            if redirection.redirect_to is None:
                log.error("nil redirection addr")
                return
            dial = redirection.dial or _default_dial
            log.warn("redirecting connection from", _peer(inbound), "to", redirection.redirect_to)
            try:
                outbound = dial(redirection.redirect_to)
            except OSError as exc:
                log.error(ProxyError("failed to redirect to target address").base(exc))
                return
            try:
                self._relay(inbound, outbound)
            finally:
                _shutdown(outbound)
        finally:
            _shutdown(inbound)

    def _relay(self, inbound: socket.socket, outbound: socket.socket) -> None:
        done: "queue.Queue[BaseException | None]" = queue.Queue()
        for src, dst in ((inbound, outbound), (outbound, inbound)):
            threading.Thread(target=_copy, args=(src, dst, done), daemon=True).start()
        while True:
            try:
                err = done.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                if self._closed.is_set():
                    log.debug("exiting")
                    return
                continue
            if err is not None:
                log.error(ProxyError("failed to redirect").base(err))
            log.info("redirection done")
            return