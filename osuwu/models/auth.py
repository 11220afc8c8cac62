from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any
from typing import Optional


@dataclass(frozen=True)
class AccessToken:
    access_token: str
    token_type: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if now is None:
            now = datetime.now(timezone.utc)

        return now >= self.expires_at

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        *,
        issued_at: Optional[datetime] = None,
    ) -> AccessToken:
        if issued_at is None:
            issued_at = datetime.now(timezone.utc)

        return cls(
            access_token=mapping["access_token"],
            token_type=mapping.get("token_type", "Bearer"),
            expires_at=issued_at + timedelta(seconds=int(mapping["expires_in"])),
        )
