"""Shared exports for the vCloud Director real and mock clients."""

from .constants import (  # noqa: F401
    ACCEPT_TEMPLATE,
    AUTH_HEADER,
    DEFAULT_API_VERSION,
    DEFAULT_PATH,
    DEFAULT_SCHEME,
    DENIED_MESSAGE,
    PREFIX_VAPP,
    PREFIX_VM,
    TYPE_VAPP,
    TYPE_VM,
)
from .hrefs import classify_id, make_href, scoped_local_id  # noqa: F401

__all__ = [
    "ACCEPT_TEMPLATE",
    "AUTH_HEADER",
    "DEFAULT_API_VERSION",
    "DEFAULT_PATH",
    "DEFAULT_SCHEME",
    "DENIED_MESSAGE",
    "PREFIX_VAPP",
    "PREFIX_VM",
    "TYPE_VAPP",
    "TYPE_VM",
    "make_href",
    "classify_id",
    "scoped_local_id",
]
