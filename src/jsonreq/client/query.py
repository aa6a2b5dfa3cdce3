"""Query-string construction for GET requests."""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlencode


def encode_query(url: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Append percent-encoded *params* to *url*.

    Keys and values are form-encoded independently (space becomes ``+``,
    reserved characters are escaped) and joined with ``&``. The block is
    attached with ``?`` when *url* has no query string yet, otherwise
    with ``&``. Pairs follow the mapping's iteration order, and a fragment
    (``#...``) stays at the end of the URL.

    An empty or missing mapping returns *url* unchanged. Nothing is ever
    rejected: unusual keys and values are encoded byte for byte.

    Args:
        url: The absolute base URL.
        params: Query parameters to append.

    Returns:
        The effective request URL.

    Example::

        >>> encode_query("https://api.example.com/search", {"q": "a b"})
        'https://api.example.com/search?q=a+b'
    """
    if not params:
        return url

    query = urlencode([(str(key), str(value)) for key, value in params.items()])
    base, hash_mark, fragment = url.partition("#")
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}{hash_mark}{fragment}"
