"""Response representation shared by the real and mock clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class VcloudResponse:
    """Parsed vCloud API response envelope."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        """Return the ``Content-Type`` header regardless of its case."""
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value
        return None
