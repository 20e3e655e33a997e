"""Fan-out of connection records to filtered, bounded subscriber queues."""

from __future__ import annotations

import dataclasses
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Union

from relaykit import log

CAPACITY = 10
"""Number of records each subscriber queue holds before new ones are dropped."""

Address = Union[str, tuple]


@dataclass(frozen=True)
class Record:
    """One observed connection or packet."""

    timestamp: str
    user_hash: str
    client_ip: str
    client_port: str
    target_host: str
    target_port: str
    transport: str
    payload: bytes | None


@dataclass(frozen=True)
class _Subscription:
    records: "queue.Queue[Record]"
    transport: str
    target_port: str
    include_payload: bool


_lock = threading.Lock()
_subscribers: dict[str, _Subscription] = {}


def _split_host_port(address: Any) -> tuple[str, str]:
    """Split an address into host and port strings; empty strings if malformed."""
    if isinstance(address, tuple):
        if len(address) < 2:
            return "", ""
        return str(address[0]), str(address[1])
    text = str(address)
    if text.startswith("["):
        end = text.find("]")
        if end < 0 or text[end + 1:end + 2] != ":":
            return "", ""
        return text[1:end], text[end + 2:]
    host, sep, port = text.rpartition(":")
    if not sep or ":" in host:
        return "", ""
    return host, port


def add(
    user_hash: str,
    client_addr: Address,
    target_addr: Address,
    transport: str,
    payload: bytes | None,
) -> None:
    """Build a record for a connection and hand it to every matching subscriber."""
    client_ip, client_port = _split_host_port(client_addr)
    target_host, target_port = _split_host_port(target_addr)
    record = Record(
        timestamp=str(time.time_ns() // 1_000_000),
        user_hash=user_hash,
        client_ip=client_ip,
        client_port=client_port,
        target_host=target_host,
        target_port=target_port,
        transport=transport,
        payload=payload,
    )
    _broadcast(record)


def subscribe(
    uid: str, transport: str, target_port: str, include_payload: bool
) -> "queue.Queue[Record]":
    """Register a subscriber and return the queue its records arrive on.

    An empty ``transport`` or ``target_port`` matches every record.
    """
    log.debug("New recorder subscriber", uid)
    subscription = _Subscription(
        records=queue.Queue(maxsize=CAPACITY),
        transport=transport,
        target_port=target_port,
        include_payload=include_payload,
    )
    with _lock:
        _subscribers[uid] = subscription
    return subscription.records


def unsubscribe(uid: str) -> None:
    """Remove a subscriber; unknown ids are ignored."""
    log.debug("Delete recorder subscriber", uid)
    with _lock:
        _subscribers.pop(uid, None)


def _broadcast(record: Record) -> None:
    payload = record.payload
    with _lock:
        subscriptions = list(_subscribers.values())
    for sub in subscriptions:
        if sub.transport and sub.transport != record.transport:
            continue
        if sub.target_port and sub.target_port != record.target_port:
            continue
        delivered = dataclasses.replace(
            record,
            payload=bytes(payload or b"") if sub.include_payload else None,
        )
        try:
            sub.records.put_nowait(delivered)
        except queue.Full:
            pass