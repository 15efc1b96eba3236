"""Source IP address formatting shared by the HTML and text renderers."""

from __future__ import annotations

import ipaddress


def format_address(ip: str | None) -> str:
    """Return *ip* in canonical form.

    IPv6 addresses are compressed and lowercased, IPv4-mapped IPv6
    addresses are shown as plain IPv4.  Values that are not IP addresses
    are returned stripped but otherwise untouched.
    """
    value = (ip or "").strip()
    try:
        addr = ipaddress.ip_address(value)
    except ValueError:
        return value
    if isinstance(addr, ipaddress.IPv6Address) and addr.ipv4_mapped is not None:
        return str(addr.ipv4_mapped)
    return str(addr)
