"""
URL canonicalization for feed items.

Strips analytics tracking parameters so two links to the same article
compare equal. The result is serialized the way a browser URL parser
would: dot segments resolved, path and fragment percent-encoded, query
re-encoded as form data. Malformed input is returned unchanged.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, quote_plus, urlencode, urlsplit, urlunsplit


TRACKING_PARAMS = frozenset({"utm_source", "utm_medium", "utm_campaign", "ref", "source"})

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Printable ASCII left as-is; quote() encodes the rest (space, '"', '<', '>', '`', '{', '}', non-ASCII)
_PATH_SAFE = "!$%&'()*+,-./:;=@[\\]^_|~"
# Fragment keeps '#', '?', '{', '}', '|' too
_FRAGMENT_SAFE = "!#$%&'()*+,-./:;=?@[\\]^_{|}~"

_SINGLE_DOT = frozenset({".", "%2e"})
_DOUBLE_DOT = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


def canonicalize_url(url: str) -> str:
    """Return the canonical form of a URL with tracking parameters removed.

    The result keeps scheme, host, path, the remaining query parameters in
    their original order, and the fragment. Scheme and host are lowercased,
    non-ASCII hosts are IDNA-encoded, default ports are dropped and an
    empty http(s) path becomes "/", so canonicalizing twice gives the same
    string.

    Args:
        url: Any string; it does not have to be a valid URL

    Returns:
        The canonical URL, or the input unchanged if it cannot be parsed

    Examples:
        >>> canonicalize_url("https://Example.com/a/../b?utm_source=x&id=1")
        'https://example.com/b?id=1'
        >>> canonicalize_url("not-a-valid-url")
        'not-a-valid-url'
    """
    stripped = url.strip()
    try:
        parts = urlsplit(stripped)
        port = parts.port
    except ValueError:
        return url
    if not parts.scheme or not parts.netloc or not parts.hostname:
        return url

    scheme = parts.scheme.lower()
    try:
        netloc = _build_netloc(parts.netloc, parts.hostname, port, scheme)
    except UnicodeError:
        return url

    path = quote(_resolve_dot_segments(parts.path), safe=_PATH_SAFE)
    if not path and scheme in _DEFAULT_PORTS:
        path = "/"

    params = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRACKING_PARAMS
    ]
    query = urlencode(params, quote_via=_quote_form)

    canonical = urlunsplit((scheme, netloc, path, query, ""))
    if "#" in stripped:
        canonical += "#" + quote(parts.fragment, safe=_FRAGMENT_SAFE)
    return canonical


def _quote_form(value: str, safe: str = "", encoding: str | None = None, errors: str | None = None) -> str:
    """Encode a query name or value as application/x-www-form-urlencoded.

    Only alphanumerics and "*-._" stay literal; "~" is encoded.
    """
    return quote_plus(value, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def _resolve_dot_segments(path: str) -> str:
    """Collapse "." and ".." segments of an absolute path.

    A trailing dot segment leaves a trailing slash, so "/a/b/.." becomes "/a/".
    """
    if not path.startswith("/"):
        return path

    segments = path[1:].split("/")
    resolved: list[str] = []
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        lowered = segment.lower()
        if lowered in _DOUBLE_DOT:
            if resolved:
                resolved.pop()
            if is_last:
                resolved.append("")
        elif lowered in _SINGLE_DOT:
            if is_last:
                resolved.append("")
        else:
            resolved.append(segment)
    return "/" + "/".join(resolved)


def _build_netloc(netloc: str, hostname: str, port: int | None, scheme: str) -> str:
    """Rebuild the network location with a lowercased host.

    User info is kept verbatim. The port is dropped when it is the
    scheme's default.

    Raises:
        UnicodeError: If a non-ASCII host cannot be IDNA-encoded
    """
    userinfo = ""
    if "@" in netloc:
        userinfo = netloc.rsplit("@", 1)[0] + "@"

    host = hostname.lower()
    if not host.isascii():
        host = host.encode("idna").decode("ascii")
    # urlsplit strips the brackets from IPv6 literals
    if ":" in host:
        host = f"[{host}]"

    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{userinfo}{host}:{port}"
    return f"{userinfo}{host}"
