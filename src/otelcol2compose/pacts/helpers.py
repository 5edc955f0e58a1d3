"""Public helper functions available to hooks and extensions."""

from urllib.parse import urlsplit

from otelcol2compose.pacts.errors import InvalidConfigurationError
from otelcol2compose.core.constants import (
    DEFAULT_CONTAINER_HOST, _LOCALHOST_RE, _LOOPBACK_LITERALS,
)


def rewrite_loopback(url: str, host_alias: str = DEFAULT_CONTAINER_HOST) -> str:
    """Replace loopback hosts in *url* with a name reachable from inside a container.

    ``localhost`` is matched case-insensitively; ``127.0.0.1`` and ``[::1]`` are
    literal. Every occurrence of every form is replaced, the rest of the URL is
    left as-is.
    """
    if not host_alias:
        raise InvalidConfigurationError("container host alias must not be empty")
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise InvalidConfigurationError(f"'{url}' is not an absolute URL")
    # Lambda keeps backslashes in the alias from being read as group refs
    text = _LOCALHOST_RE.sub(lambda _m: host_alias, url)
    for literal in _LOOPBACK_LITERALS:
        text = text.replace(literal, host_alias)
    return text


def is_secure_url(url: str) -> bool:
    """True when the URL scheme asks for encrypted transport."""
    return url[:5].lower() == "https"
