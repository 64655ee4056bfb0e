"""Turn user input into one IP address, and back into a hostname."""

from __future__ import annotations

import ipaddress
import logging
import re
import socket

from .errors import InvalidInputError, ResolutionError
from .models import IPAddress

log = logging.getLogger(__name__)

# Patterns that replace the dot in defanged addresses
_DOT_PATTERNS = [
    r"\[\.\]",
    r"\[dot\]",
    r"\(dot\)",
    r"\(\.\)",
]
_DOT_RE = re.compile("|".join(_DOT_PATTERNS), re.IGNORECASE)

# Anything a hostname or address literal could contain; letters in any
# script, since getaddrinfo does the IDNA encoding itself
_HOST_RE = re.compile(r"^[\w.:%\-]+$")


def refang(text: str) -> str:
    """Replace defanged dot notations with actual dots.

    Handles: [.] [dot] (dot) (.)
    """
    return _DOT_RE.sub(".", text)


def parse_ip(text: str) -> IPAddress | None:
    """Parse an IPv4/IPv6 literal, or return None if *text* is not one.

    Brackets around IPv6 literals ("[::1]") are accepted.
    """
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def resolve_address(query: str) -> IPAddress:
    """Resolve an address literal or hostname to a single IP address.

    Literals are returned as-is without touching the network. Hostnames go
    through the system resolver and the first address it returns wins.
    """
    text = refang(query.strip())
    if not text:
        raise InvalidInputError("no address or hostname given")

    literal = parse_ip(text)
    if literal is not None:
        return literal

    if not _HOST_RE.match(text) or len(text) > 253:
        raise InvalidInputError(f"not an IP address or hostname: {query!r}")

    log.debug("Resolving hostname %s", text)
    try:
        infos = socket.getaddrinfo(text, None, proto=socket.IPPROTO_TCP)
    except (OSError, UnicodeError) as exc:  # gaierror and timeouts included
        raise ResolutionError(f"cannot resolve {text}: {exc}") from exc

    for _family, _type, _proto, _canonname, sockaddr in infos:
        # sockaddr[0] may carry an IPv6 zone id ("fe80::1%eth0")
        address = parse_ip(sockaddr[0].split("%", 1)[0])
        if address is not None:
            log.debug("%s resolved to %s", text, address)
            return address

    raise ResolutionError(f"cannot resolve {text}: no addresses returned")


def reverse_lookup(ip: IPAddress) -> str | None:
    """Return the PTR hostname for *ip*, or None when there is none."""
    try:
        hostname, _aliases, _addresses = socket.gethostbyaddr(str(ip))
    except OSError as exc:
        log.debug("No reverse DNS for %s: %s", ip, exc)
        return None
    return hostname or None
