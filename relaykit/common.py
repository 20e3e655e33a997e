"""Assorted helpers: hashing, asset paths, traffic formatting and networking."""

from __future__ import annotations

import hashlib
import os
import queue
import socket
import sys
import urllib.error
import urllib.parse
import urllib.request
from typing import BinaryIO

from relaykit import log
from relaykit.errors import ProxyError

KIB = 1024
MIB = KIB * 1024
GIB = MIB * 1024

ASSET_LOCATION_ENV = "RELAYKIT_LOCATION_ASSET"


def sha224_string(password: str) -> str:
    """Return the lower-case hex SHA-224 digest of ``password``."""
    return hashlib.sha224(password.encode()).hexdigest()


def get_program_dir() -> str:
    """Return the absolute directory of the running program."""
    return os.path.abspath(os.path.dirname(sys.argv[0]))


def get_asset_location(file: str) -> str:
    """Resolve an asset file name against the asset directory."""
    if os.path.isabs(file):
        return file
    location = os.environ.get(ASSET_LOCATION_ENV, "")
    if location:
        abs_path = os.path.abspath(location)
        log.debugf("env set: %s=%s", ASSET_LOCATION_ENV, abs_path)
        return os.path.join(abs_path, file)
    return os.path.join(get_program_dir(), file)


def human_friendly_traffic(num_bytes: int) -> str:
    """Format a byte count using B, KiB, MiB or GiB."""
    if num_bytes <= KIB:
        return f"{num_bytes} B"
    if num_bytes <= MIB:
        return f"{num_bytes / KIB:.2f} KiB"
    if num_bytes <= GIB:
        return f"{num_bytes / MIB:.2f} MiB"
    return f"{num_bytes / GIB:.2f} GiB"


def pick_port(network: str, host: str) -> int:
    """Return a currently free port on ``host`` for "tcp" or "udp", or 0."""
    kinds = {"tcp": socket.SOCK_STREAM, "udp": socket.SOCK_DGRAM}
    kind = kinds.get(network)
    if kind is None:
        return 0
    for _ in range(16):
        try:
            family, _, _, _, address = socket.getaddrinfo(host, 0, type=kind)[0]
            with socket.socket(family, kind) as sock:
                sock.bind(address)
                return sock.getsockname()[1]
        except OSError:
            continue
    return 0


def write_all_bytes(writer: BinaryIO, payload: bytes) -> None:
    """Write the whole payload, retrying after short writes."""
    view = memoryview(payload)
    while view:
        written = writer.write(view)
        if written is None:
            written = len(view)
        view = view[written:]


def write_file(path: str | os.PathLike, payload: bytes) -> None:
    """Create or truncate ``path`` and write ``payload`` to it."""
    with open(path, "wb") as writer:
        write_all_bytes(writer, payload)


def fetch_http_content(target: str) -> bytes:
    """GET an http(s) URL and return the body of a 200 response."""
    try:
        parsed = urllib.parse.urlsplit(target)
    except ValueError as exc:
        raise ProxyError(f"invalid URL: {target}") from exc

    if parsed.scheme.lower() not in ("http", "https"):
        raise ProxyError(f"invalid scheme: {parsed.scheme}")

    request = urllib.request.Request(
        target, method="GET", headers={"Connection": "close"}
    )
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            if response.status != 200:
                raise ProxyError(f"unexpected HTTP status code: {response.status}")
            try:
                return response.read()
            except OSError as exc:
                raise ProxyError("failed to read HTTP response") from exc
    except urllib.error.HTTPError as exc:
        raise ProxyError(f"unexpected HTTP status code: {exc.code}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise ProxyError(f"failed to dial to {target}") from exc


class Notifier:
    """Coalescing change notification: many signals, one pending wake-up."""

    def __init__(self) -> None:
        self._pending: queue.Queue[None] = queue.Queue(maxsize=1)

    def signal(self) -> None:
        """Record a change; never blocks."""
        try:
            self._pending.put_nowait(None)
        except queue.Full:
            pass

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for a change; return False if ``timeout`` elapsed first."""
        try:
            self._pending.get(timeout=timeout)
        except queue.Empty:
            return False
        return True