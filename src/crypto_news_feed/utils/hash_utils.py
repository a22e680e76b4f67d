"""
Article fingerprinting helpers.
"""

import base64
import re
from urllib.parse import quote

# Characters encodeURIComponent leaves unescaped (besides alphanumerics and "-_.~")
_URI_COMPONENT_SAFE = "!*'()"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")

DEFAULT_ID_LENGTH = 20


def encode_uri_component(value: str) -> str:
    """Percent-encode ``value`` the way a URI component is encoded in a query string."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def compute_article_id(title: str, link: str, length: int = DEFAULT_ID_LENGTH) -> str:
    """Compute a stable article identifier from its title and link.

    The concatenated title and link are URI-component encoded, base64 encoded,
    reduced to alphanumerics and cut to ``length`` characters. This is a
    fingerprint, not a cryptographic hash: distinct articles whose encodings
    share a prefix collide.

    Args:
        title: Raw (untruncated) article title
        link: Raw article link
        length: Number of characters to keep

    Returns:
        Alphanumeric identifier of at most ``length`` characters
    """
    encoded = encode_uri_component(f"{title}{link}")
    b64 = base64.b64encode(encoded.encode("ascii")).decode("ascii")
    return _NON_ALNUM.sub("", b64)[:length]
