from __future__ import annotations

from typing import Any
from typing import Optional


class OsuwuError(Exception):
    """Base class for every error raised by the library."""


class ParseError(OsuwuError):
    """The chart document is empty, malformed or missing a required field."""

    def __init__(
        self,
        message: str,
        *,
        beatmap_id: Optional[int] = None,
        line: Optional[int] = None,
    ) -> None:
        self.message = message
        self.beatmap_id = beatmap_id
        self.line = line

        context = []
        if beatmap_id is not None:
            context.append(f"beatmap {beatmap_id}")
        if line is not None:
            context.append(f"line {line}")

        if context:
            message = f"{message} ({', '.join(context)})"

        super().__init__(message)


class NotFoundError(OsuwuError):
    def __init__(self, beatmap_id: int | str) -> None:
        self.beatmap_id = beatmap_id
        super().__init__(f"{beatmap_id} is not the ID of a valid beatmap")


class UnknownModifierError(OsuwuError):
    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Unknown modifier token {token!r}")


class InvalidPlayResultError(OsuwuError):
    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class AuthenticationError(OsuwuError):
    """The client is not authenticated against the v2 API, or the token
    exchange was rejected."""


class UnsupportedEndpointError(OsuwuError):
    def __init__(self, endpoint: str, api_version: Any) -> None:
        self.endpoint = endpoint
        self.api_version = api_version
        super().__init__(f"{endpoint} is not available on API {api_version}")
