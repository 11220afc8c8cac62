from __future__ import annotations

import asyncio
import logging
import pprint

import httpx
from fastapi import FastAPI
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import ORJSONResponse
from fastapi.responses import Response

import config
import osuwu.state
from osuwu.adapters.osu_api import ApiVersion
from osuwu.adapters.osu_api import ClientConfig
from osuwu.adapters.osu_api import OsuClient
from osuwu.exception_handling import hook_loop_exception_handler
from osuwu.exceptions import AuthenticationError
from osuwu.exceptions import InvalidPlayResultError
from osuwu.exceptions import NotFoundError
from osuwu.exceptions import OsuwuError
from osuwu.exceptions import ParseError
from osuwu.exceptions import UnknownModifierError
from osuwu.exceptions import UnsupportedEndpointError

ERROR_STATUS_CODES: dict[type[OsuwuError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ParseError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnknownModifierError: status.HTTP_400_BAD_REQUEST,
    InvalidPlayResultError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_502_BAD_GATEWAY,
    UnsupportedEndpointError: status.HTTP_501_NOT_IMPLEMENTED,
}


def status_code_for(error: OsuwuError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code

    return status.HTTP_500_INTERNAL_SERVER_ERROR


def client_config_from_settings() -> ClientConfig:
    return ClientConfig(
        api_version=ApiVersion(config.OSU_API_VERSION),
        api_key=config.OSU_API_KEY,
        client_id=config.OSU_CLIENT_ID,
        client_secret=config.OSU_CLIENT_SECRET,
        timeout=config.OSU_API_TIMEOUT,
        retries=config.OSU_API_RETRIES,
    )


def init_events(asgi_app: FastAPI) -> None:
    @asgi_app.on_event("startup")
    async def on_startup() -> None:
        hook_loop_exception_handler(asyncio.get_running_loop())

        client_config = client_config_from_settings()
        osuwu.state.services.osu_client = OsuClient(
            client_config,
            http_client=httpx.AsyncClient(timeout=client_config.timeout),
        )

        if client_config.api_version is ApiVersion.V2:
            await osuwu.state.services.osu_client.authenticate()

        logging.info(
            "Server has started!",
            extra={"api_version": client_config.api_version.value},
        )

    @asgi_app.on_event("shutdown")
    async def on_shutdown() -> None:
        await osuwu.state.services.osu_client.http_client.aclose()

        logging.info("Server has shutdown!")

    @asgi_app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request,
        e: RequestValidationError,
    ) -> Response:
        logging.error(
            f"Validation error on {request.url}:\n{pprint.pformat(e.errors())}",
        )

        return ORJSONResponse(
            content=jsonable_encoder(e.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @asgi_app.exception_handler(OsuwuError)
    async def handle_library_error(
        request: Request,
        e: OsuwuError,
    ) -> Response:
        status_code = status_code_for(e)

        logging.warning(
            "Request failed with a library error",
            extra={
                "url": str(request.url),
                "error_type": type(e).__name__,
                "status": status_code,
            },
        )

        return ORJSONResponse(
            content={"status": status_code, "message": str(e)},
            status_code=status_code,
        )


def init_fastapi() -> FastAPI:
    asgi_app = FastAPI()

    init_events(asgi_app)

    import osuwu.api

    asgi_app.include_router(osuwu.api.router)

    return asgi_app


asgi_app = init_fastapi()
