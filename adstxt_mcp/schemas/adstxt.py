"""Ads.txt cache schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AdsTxtCacheResult(BaseModel):
    """Cached ads.txt for a publisher domain as stored by the backend."""

    model_config = ConfigDict(extra="allow")

    domain: str | None = None
    content: str | None = None
    fetched_at: str | None = None
    status: str
    """One of ``success``, ``not_found`` or ``error``."""

    @property
    def is_available(self) -> bool:
        return self.status == "success"
