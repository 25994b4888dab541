"""
URL normalization for the crawl frontier.

Every URL the crawler sees, the seed included, goes through :func:`normalize`
before it is compared, classified or stored. Two references that point to the
same resource (differing only in fragment, letter case of scheme/host, default
port, or written relative to the same base) end up as the same
:class:`NormalizedUrl`.
"""
from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

__all__ = ("InvalidUrl", "NormalizedUrl", "normalize", "SUPPORTED_SCHEMES")

SUPPORTED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_ESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_HOST_RE = re.compile(r"[a-z0-9_-]+(?:\.[a-z0-9_-]+)*")
_UNRESERVED = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~")
# RFC 3986 unreserved + sub-delims + ":@/" + "%" for already-escaped octets
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"
_QUERY_SAFE = _PATH_SAFE + "?"


class InvalidUrl(ValueError):
    """Raised when a reference cannot be turned into a crawlable URL."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"{reason}: {raw!r}")
        self.raw = raw
        self.reason = reason


@dataclass(frozen=True, slots=True)
class NormalizedUrl:
    """Canonical, hashable form of an http(s) URL without fragment."""

    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: str

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return host if self.port is None else f"{host}:{self.port}"

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, ""))

    def __lt__(self, other: "NormalizedUrl") -> bool:
        if not isinstance(other, NormalizedUrl):
            return NotImplemented
        return str(self) < str(other)


def _canonical_escapes(text: str) -> str:
    """Decode escaped unreserved characters and upper-case the remaining escapes."""

    def repl(match: re.Match) -> str:
        char = chr(int(match.group(1), 16))
        return char if char in _UNRESERVED else "%" + match.group(1).upper()

    return _ESCAPE_RE.sub(repl, text)


def _remove_dot_segments(path: str) -> str:
    """RFC 3986 section 5.2.4 for an absolute path."""
    segments = path.split("/")
    resolved = []
    for segment in segments[1:]:
        if segment == "..":
            if resolved:
                resolved.pop()
        elif segment != ".":
            resolved.append(segment)
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/" + "/".join(resolved)


def _canonical_host(raw: str, host: str) -> str:
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as exc:
            raise InvalidUrl(raw, "invalid IPv6 host") from exc
        return host
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise InvalidUrl(raw, "invalid host") from exc
    if not _HOST_RE.fullmatch(host):
        raise InvalidUrl(raw, "invalid host")
    return host


def normalize(raw: str, base: Union[NormalizedUrl, str, None] = None) -> NormalizedUrl:
    """
    Resolve *raw* against *base* (if relative) and canonicalize it.

    Dot segments are removed from every path, escapes of unreserved characters
    are decoded and the others upper-cased. Non-ASCII hosts are IDNA-encoded.

    Raises :class:`InvalidUrl` for malformed escapes, unsupported schemes,
    missing or malformed hosts, bad ports and relative references without a
    base.
    """
    ref = raw.strip()
    if _BAD_ESCAPE_RE.search(ref):
        raise InvalidUrl(raw, "malformed percent-encoding")

    try:
        if base is not None:
            ref = urljoin(str(base), ref)
        parts = urlsplit(ref)
    except ValueError as exc:
        raise InvalidUrl(raw, str(exc)) from exc

    scheme = parts.scheme.lower()
    if not scheme:
        raise InvalidUrl(raw, "relative reference without base")
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidUrl(raw, f"unsupported scheme {scheme!r}")

    host = (parts.hostname or "").rstrip(".").lower()
    if not host:
        raise InvalidUrl(raw, "empty host")
    host = _canonical_host(raw, host)

    try:
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(raw, "invalid port") from exc
    if port == _DEFAULT_PORTS[scheme]:
        port = None

    path = _remove_dot_segments(_canonical_escapes(parts.path) or "/")
    path = quote(path, safe=_PATH_SAFE)
    query = quote(_canonical_escapes(parts.query), safe=_QUERY_SAFE)
    return NormalizedUrl(scheme=scheme, host=host, port=port, path=path, query=query)
