"""Client address helpers shared by ingestion and rate limiting."""

from __future__ import annotations

import ipaddress
from typing import Mapping, Optional

from flask import current_app, request

# Checked in order; the first present value wins.
_ORIGIN_HEADERS = ("CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP")

_NON_ROUTABLE = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "::1/128",
        "fc00::/7",
        "fe80::/10",
    )
)


def resolve_client_origin(
    headers: Mapping[str, str],
    remote_addr: Optional[str],
    trust_proxy: bool = True,
) -> str:
    """Return the best guess at the client address, or "" when nothing is known."""
    if trust_proxy:
        for name in _ORIGIN_HEADERS:
            value = (headers.get(name) or "").strip()
            if name == "X-Forwarded-For":
                value = value.split(",")[0].strip()
            if value:
                return value
    return (remote_addr or "").strip()


def is_private_address(value: str) -> bool:
    """True for loopback, link-local and private ranges, and for anything unparseable."""
    if not value:
        return True
    try:
        address = ipaddress.ip_address(value.split("%", 1)[0])
    except ValueError:
        return True
    mapped = getattr(address, "ipv4_mapped", None)
    if mapped is not None:
        address = mapped
    return any(address in network for network in _NON_ROUTABLE if network.version == address.version)


def client_origin_key() -> str:
    """Flask-Limiter key function: one bucket per resolved client address."""
    trust_proxy = current_app.config.get("TRUST_PROXY", True)
    return resolve_client_origin(request.headers, request.remote_addr, trust_proxy) or "unknown"
