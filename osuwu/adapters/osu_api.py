from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from enum import IntEnum
from enum import StrEnum
from typing import Any
from typing import Optional
from typing import Union

import httpx
from fastapi import status
from starlette.config import Config
from tenacity import AsyncRetrying
from tenacity import stop_after_attempt
from tenacity import wait_exponential

from osuwu.adapters.response_shapes import ResponseShape
from osuwu.adapters.response_shapes import V1Shape
from osuwu.adapters.response_shapes import V2Shape
from osuwu.constants import mods as mods_codec
from osuwu.constants.mode import Mode
from osuwu.exceptions import AuthenticationError
from osuwu.exceptions import NotFoundError
from osuwu.exceptions import UnsupportedEndpointError
from osuwu.models.auth import AccessToken
from osuwu.models.beatmap import Beatmap
from osuwu.models.beatmap import BeatmapMetadata
from osuwu.models.match import Match
from osuwu.models.match import Replay
from osuwu.models.score import Score
from osuwu.models.user import User
from osuwu.reliability import retry_if_exception_network_related
from osuwu.reliability import wait_retry_after
from osuwu.utils.datetime import LEGACY_DATE_FORMAT

UserLookup = Union[int, str]
ModsLike = Union[int, str, None]

V1_BASE_URL = "https://osu.ppy.sh/api"
V2_BASE_URL = "https://osu.ppy.sh/api/v2"
OAUTH_URL = "https://osu.ppy.sh/oauth"
CHART_URL = "https://osu.ppy.sh/osu"


class ApiVersion(StrEnum):
    V1 = "v1"
    V2 = "v2"


class AuthState(IntEnum):
    UNAUTHENTICATED = 0
    AUTHENTICATED = 1


@dataclass(frozen=True)
class Limit:
    minimum: int
    maximum: int
    noun: str

    def clamp(self, limit: Optional[int]) -> Optional[int]:
        if limit is None:
            return None

        if limit < self.minimum:
            logging.warning(
                f"The minimum amount of {self.noun} you can fetch is {self.minimum}",
                extra={"requested": limit, "limit": self.minimum},
            )
            return self.minimum

        if limit > self.maximum:
            logging.warning(
                f"The maximum amount of {self.noun} you can fetch is {self.maximum}",
                extra={"requested": limit, "limit": self.maximum},
            )
            return self.maximum

        return limit


BEATMAPS_LIMIT = Limit(1, 500, "beatmaps")
SCORES_LIMIT = Limit(1, 100, "scores")
BEST_SCORES_LIMIT = Limit(1, 100, "top scores")
RECENT_SCORES_LIMIT = Limit(1, 50, "recent scores")
EVENT_DAYS_LIMIT = Limit(1, 31, "event days")


@dataclass(frozen=True)
class ClientConfig:
    api_version: ApiVersion = ApiVersion.V1

    # v1
    api_key: Optional[str] = None

    # v2
    client_id: Optional[int] = None
    client_secret: Optional[str] = None

    base_url: Optional[str] = None
    oauth_url: str = OAUTH_URL
    chart_url: str = CHART_URL

    timeout: float = 7.0
    retries: int = 3
    retry_wait: float = 1.0

    @property
    def api_url(self) -> str:
        if self.base_url is not None:
            return self.base_url.rstrip("/")

        if self.api_version is ApiVersion.V2:
            return V2_BASE_URL

        return V1_BASE_URL

    @classmethod
    def from_environ(cls, env_file: Optional[str] = ".env") -> ClientConfig:
        config = Config(env_file)

        return cls(
            api_version=ApiVersion(config("OSU_API_VERSION", default="v1").lower()),
            api_key=config("OSU_API_KEY", default=None),
            client_id=config("OSU_CLIENT_ID", cast=int, default=None),
            client_secret=config("OSU_CLIENT_SECRET", default=None),
            timeout=config("OSU_API_TIMEOUT", cast=float, default=7.0),
            retries=config("OSU_API_RETRIES", cast=int, default=3),
        )


def _user_type(user: UserLookup) -> str:
    return "id" if isinstance(user, int) else "string"


class OsuClient:
    """The one client for the osu! api.

    The api version is fixed at construction; responses of either version
    are reshaped into the same records.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if config.api_version is ApiVersion.V1 and not config.api_key:
            raise ValueError("The v1 api requires an api key")

        if config.api_version is ApiVersion.V2 and (
            config.client_id is None or not config.client_secret
        ):
            raise ValueError("The v2 api requires a client id and secret")

        self.config = config
        self.shape: ResponseShape = (
            V2Shape() if config.api_version is ApiVersion.V2 else V1Shape()
        )

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

        self._token: Optional[AccessToken] = None

    async def __aenter__(self) -> OsuClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    @property
    def api_version(self) -> ApiVersion:
        return self.config.api_version

    @property
    def auth_state(self) -> AuthState:
        if self._token is None or self._token.is_expired():
            return AuthState.UNAUTHENTICATED

        return AuthState.AUTHENTICATED

    async def _access_token(self) -> AccessToken:
        """Returns a usable access token, exchanging the client credentials
        for a new one when there is none or it has expired."""

        if self._token is not None and self._token.is_expired():
            logging.info(
                "osu! api access token expired, re-authenticating",
                extra={"client_id": self.config.client_id},
            )
            self._token = None

        if self._token is None:
            return await self.authenticate()

        return self._token

    def _require_v1(self, endpoint: str) -> V1Shape:
        if self.api_version is not ApiVersion.V1 or not isinstance(self.shape, V1Shape):
            raise UnsupportedEndpointError(endpoint, self.api_version)

        return self.shape

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_network_related(),
            wait=wait_retry_after(wait_exponential(multiplier=self.config.retry_wait)),
            stop=stop_after_attempt(max(1, self.config.retries)),
            reraise=True,
        ):
            with attempt:
                response = await self.http_client.request(
                    method,
                    url,
                    timeout=self.config.timeout,
                    **kwargs,
                )
                if response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                    response.raise_for_status()

        return response

    async def authenticate(self) -> AccessToken:
        """Exchanges the client credentials for an access token.

        Raises:
            UnsupportedEndpointError: The client uses the v1 api.
            AuthenticationError: The credentials were rejected.
        """

        if self.api_version is not ApiVersion.V2:
            raise UnsupportedEndpointError("authenticate", self.api_version)

        response = await self._send(
            "POST",
            f"{self.config.oauth_url}/token",
            json={
                "grant_type": "client_credentials",
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "scope": "public",
            },
            headers={"Accept": "application/json"},
        )
        if response.status_code in (
            status.HTTP_400_BAD_REQUEST,
            status.HTTP_401_UNAUTHORIZED,
        ):
            logging.error(
                "osu! api rejected the client credentials",
                extra={"status": response.status_code, "client_id": self.config.client_id},
            )
            raise AuthenticationError("The osu! api rejected the client credentials")

        response.raise_for_status()

        self._token = AccessToken.from_mapping(
            response.json(),
            issued_at=datetime.now(timezone.utc),
        )
        return self._token

    async def _get_v1(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        query = {key: value for key, value in params.items() if value is not None}
        query["k"] = self.config.api_key

        response = await self._send("GET", f"{self.config.api_url}/{endpoint}", params=query)
        response.raise_for_status()
        return response.json()

    async def _get_v2(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        query = {key: value for key, value in (params or {}).items() if value is not None}

        # a revoked token gets one fresh exchange before giving up
        for attempt in range(2):
            token = await self._access_token()
            response = await self._send(
                "GET",
                f"{self.config.api_url}/{path}",
                params=query,
                headers={
                    "Authorization": token.authorization,
                    "Accept": "application/json",
                },
            )
            if response.status_code != status.HTTP_401_UNAUTHORIZED:
                break

            logging.warning(
                "osu! api rejected the access token",
                extra={"path": path, "attempt": attempt},
            )
            self._token = None
        else:
            raise AuthenticationError("The osu! api no longer accepts the access token")

        if response.status_code == status.HTTP_404_NOT_FOUND:
            return None

        response.raise_for_status()
        return response.json()

    async def get_beatmaps(
        self,
        *,
        since: Optional[datetime] = None,
        beatmapset_id: Optional[int] = None,
        beatmap_id: Optional[int] = None,
        user: Optional[UserLookup] = None,
        mode: Optional[Mode] = None,
        converted: Optional[bool] = None,
        hash: Optional[str] = None,
        limit: Optional[int] = None,
        mods: ModsLike = None,
    ) -> list[Beatmap]:
        """Looks up every difficulty matching the given filters."""

        limit = BEATMAPS_LIMIT.clamp(limit)

        if self.api_version is ApiVersion.V2:
            filters = (since, beatmapset_id, user, converted, hash, mods)
            if beatmap_id is None or any(value is not None for value in filters):
                raise UnsupportedEndpointError("get_beatmaps", self.api_version)

            beatmap = await self.get_beatmap(beatmap_id)
            return [beatmap] if beatmap is not None else []

        if since is not None:
            since = since.astimezone(timezone.utc)

        response_json = await self._get_v1(
            "get_beatmaps",
            {
                "since": since.strftime(LEGACY_DATE_FORMAT) if since else None,
                "s": beatmapset_id,
                "b": beatmap_id,
                "u": user,
                "type": _user_type(user) if user is not None else None,
                "m": int(mode) if mode is not None else None,
                "a": int(converted) if converted is not None else None,
                "h": hash,
                "limit": limit,
                "mods": int(mods_codec.normalize(mods)) if mods is not None else None,
            },
        )
        return [self.shape.beatmap(beatmap) for beatmap in response_json or []]

    async def get_beatmap(
        self,
        beatmap_id: int,
        *,
        mods: ModsLike = None,
    ) -> Optional[Beatmap]:
        if self.api_version is ApiVersion.V2:
            response_json = await self._get_v2(f"beatmaps/{beatmap_id}")
            if not response_json:
                return None

            return self.shape.beatmap(response_json)

        beatmaps = await self.get_beatmaps(beatmap_id=beatmap_id, mods=mods)
        for beatmap in beatmaps:
            if beatmap.beatmap_id == beatmap_id:
                return beatmap

        return None

    async def get_user(
        self,
        user: UserLookup,
        *,
        mode: Mode = Mode.STD,
        event_days: Optional[int] = None,
    ) -> Optional[User]:
        mode = Mode(mode)

        if self.api_version is ApiVersion.V2:
            response_json = await self._get_v2(
                f"users/{user}/{mode.ruleset}",
                {"key": "id" if isinstance(user, int) else "username"},
            )
            if not response_json:
                return None

            return self.shape.user(response_json)

        response_json = await self._get_v1(
            "get_user",
            {
                "u": user,
                "m": int(mode),
                "type": _user_type(user),
                "event_days": EVENT_DAYS_LIMIT.clamp(event_days),
            },
        )
        if not response_json:
            return None

        return self.shape.user(response_json[0])

    async def get_scores(
        self,
        beatmap_id: int,
        *,
        user: Optional[UserLookup] = None,
        mode: Optional[Mode] = None,
        mods: ModsLike = None,
        limit: Optional[int] = None,
    ) -> list[Score]:
        """Looks up the top scores of a beatmap."""

        self._require_v1("get_scores")
        limit = SCORES_LIMIT.clamp(limit)

        response_json = await self._get_v1(
            "get_scores",
            {
                "b": beatmap_id,
                "u": user,
                "type": _user_type(user) if user is not None else None,
                "m": int(mode) if mode is not None else None,
                "mods": int(mods_codec.normalize(mods)) if mods is not None else None,
                "limit": limit,
            },
        )
        return [self.shape.score(score) for score in response_json or []]

    async def _resolve_user_id(self, user: UserLookup, mode: Mode) -> Optional[int]:
        # v2 score lookups only accept numeric ids
        if isinstance(user, int):
            return user

        resolved = await self.get_user(user, mode=mode)
        if resolved is None:
            return None

        return resolved.user_id

    async def _get_user_scores(
        self,
        kind: str,
        user: UserLookup,
        *,
        mode: Mode,
        limit: Optional[int],
    ) -> list[Score]:
        mode = Mode(mode)

        if self.api_version is ApiVersion.V2:
            user_id = await self._resolve_user_id(user, mode)
            if user_id is None:
                return []

            response_json = await self._get_v2(
                f"users/{user_id}/scores/{kind}",
                {
                    "mode": mode.ruleset,
                    "limit": limit,
                    "include_fails": 1 if kind == "recent" else None,
                },
            )
        else:
            response_json = await self._get_v1(
                f"get_user_{kind}",
                {
                    "u": user,
                    "m": int(mode),
                    "type": _user_type(user),
                    "limit": limit,
                },
            )

        return [self.shape.score(score) for score in response_json or []]

    async def get_user_best(
        self,
        user: UserLookup,
        *,
        mode: Mode = Mode.STD,
        limit: Optional[int] = None,
    ) -> list[Score]:
        return await self._get_user_scores(
            "best",
            user,
            mode=mode,
            limit=BEST_SCORES_LIMIT.clamp(limit),
        )

    async def get_user_recent(
        self,
        user: UserLookup,
        *,
        mode: Mode = Mode.STD,
        limit: Optional[int] = None,
    ) -> list[Score]:
        return await self._get_user_scores(
            "recent",
            user,
            mode=mode,
            limit=RECENT_SCORES_LIMIT.clamp(limit),
        )

    async def get_match(self, match_id: int) -> Optional[Match]:
        shape = self._require_v1("get_match")

        response_json = await self._get_v1("get_match", {"mp": match_id})

        # unknown matches come back as {"match": 0, "games": []}
        if not response_json or not response_json.get("match"):
            return None

        return shape.match(response_json)

    async def get_replay(
        self,
        beatmap_id: int,
        user: UserLookup,
        *,
        mode: Optional[Mode] = None,
        score_id: Optional[int] = None,
        mods: ModsLike = None,
    ) -> Optional[Replay]:
        """Looks up the replay of a score.

        The osu! api only allows 10 of these requests a minute.
        """

        shape = self._require_v1("get_replay")

        response_json = await self._get_v1(
            "get_replay",
            {
                "b": beatmap_id,
                "u": user,
                "type": _user_type(user),
                "m": int(mode) if mode is not None else None,
                "s": score_id,
                "mods": int(mods_codec.normalize(mods)) if mods is not None else None,
            },
        )
        if not response_json or "content" not in response_json:
            logging.warning(
                "Replay not available",
                extra={
                    "beatmap_id": beatmap_id,
                    "user": user,
                    "error": (response_json or {}).get("error"),
                },
            )
            return None

        return shape.replay(response_json)

    async def fetch_chart_document(self, beatmap_id: int) -> bytes:
        """Downloads the ``.osu`` document of a beatmap.

        Raises:
            NotFoundError: No beatmap has the given id.
        """

        response = await self._send("GET", f"{self.config.chart_url}/{beatmap_id}")
        if response.status_code == status.HTTP_404_NOT_FOUND:
            raise NotFoundError(beatmap_id)

        response.raise_for_status()

        if not response.content:
            raise NotFoundError(beatmap_id)

        return response.content

    async def fetch_beatmap_metadata(self, beatmap_id: int) -> Optional[BeatmapMetadata]:
        try:
            beatmap = await self.get_beatmap(beatmap_id)
        except Exception:
            logging.exception(
                "Failed to fetch beatmap metadata from the osu! api",
                extra={"beatmap_id": beatmap_id},
            )
            return None

        if beatmap is None:
            return None

        return beatmap.metadata
