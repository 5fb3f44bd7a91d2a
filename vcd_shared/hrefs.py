"""Helpers for building vCloud hrefs and classifying object identifiers."""

from __future__ import annotations

from .constants import DEFAULT_PATH, DEFAULT_SCHEME, PREFIX_VAPP, PREFIX_VM


def make_href(host: str, rel: str, scheme: str = DEFAULT_SCHEME, path: str = DEFAULT_PATH) -> str:
    """Return the absolute API href for a relative resource path.

    Args:
        host: API host, optionally with ``:port``.
        rel: Resource path relative to the API root (e.g. ``vApp/vapp-1``).
        scheme: URL scheme.
        path: API root path on the host.

    Returns:
        str: Absolute href such as ``https://host/api/vApp/vapp-1``.
    """
    root = "/" + path.strip("/") if path.strip("/") else ""
    return f"{scheme}://{host}{root}/{rel.lstrip('/')}"


def classify_id(object_id: str) -> str | None:
    """Return ``"vapp"`` or ``"vm"`` for a vCloud identifier, else ``None``."""
    if object_id.startswith(PREFIX_VAPP):
        return "vapp"
    if object_id.startswith(PREFIX_VM):
        return "vm"
    return None


def scoped_local_id(vapp_id: str) -> str:
    """Return the vApp-scoped local id: the last ``-`` chunk of the vApp id."""
    return vapp_id.split("-")[-1]


__all__ = ["make_href", "classify_id", "scoped_local_id"]
