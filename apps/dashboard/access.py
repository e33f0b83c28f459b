from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from apps.dashboard.settings import DEFAULT_LOCAL_DEV_HOSTS


def normalize_host(host: str | None) -> str:
    """Lower-case a ``Host`` header value and drop the port and IPv6 brackets."""
    if not host:
        return ""
    text = host.strip().lower()
    if text.startswith("["):
        closing = text.find("]")
        return text[1:closing] if closing != -1 else text[1:]
    if text.count(":") == 1:
        text = text.split(":", 1)[0]
    return text


def is_local_dev_host(host: str | None, allowed_hosts: Iterable[str] = DEFAULT_LOCAL_DEV_HOSTS) -> bool:
    allowed = {normalize_host(item) for item in allowed_hosts}
    candidate = normalize_host(host)
    return bool(candidate) and candidate in allowed


@dataclass(frozen=True)
class AccessGate:
    """Whether write controls are shown, decided once per session.

    The decision is not re-evaluated if the host changes later in the same
    session; the backend remains the real authority on writes.
    """

    host: str
    writes_enabled: bool

    @classmethod
    def evaluate(cls, host: str | None, allowed_hosts: Iterable[str] = DEFAULT_LOCAL_DEV_HOSTS) -> AccessGate:
        return cls(host=normalize_host(host), writes_enabled=is_local_dev_host(host, allowed_hosts))
