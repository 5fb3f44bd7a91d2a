"""vCloud Director client: fetch vApp and VM descriptors, real or mocked."""

from __future__ import annotations

from .client import VcloudDirectorClient
from .config import client_settings, set_config
from .errors import (
    BadRequest,
    Conflict,
    Forbidden,
    NotFound,
    ServiceError,
    Unauthorized,
    VcloudConnectionError,
    VcloudDirectorError,
)
from .messages import VcloudResponse
from .mock import MockVcloudDirectorClient
from .utils import ensure_list
from .xml_hash import to_hash


def new_client(cfg: dict | None = None):
    """Return a real or mock client for a configuration map.

    Args:
        cfg: Output of ``set_config``; ``None`` loads ``config.yaml`` and the
            environment.

    Returns:
        VcloudDirectorClient | MockVcloudDirectorClient: Mock when
        ``vcloud_director.mock`` is set.
    """
    settings = client_settings(cfg if cfg is not None else set_config())
    if settings["mock"]:
        return MockVcloudDirectorClient.from_settings(settings)
    return VcloudDirectorClient.from_settings(settings)


__all__ = [
    "VcloudDirectorClient",
    "MockVcloudDirectorClient",
    "VcloudResponse",
    "VcloudDirectorError",
    "VcloudConnectionError",
    "BadRequest",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "Conflict",
    "ServiceError",
    "ensure_list",
    "to_hash",
    "new_client",
    "set_config",
    "client_settings",
]
