from __future__ import annotations

import logging

from starlette.config import Config

config = Config(".env")

APP_HOST = config("APP_HOST", default="127.0.0.1")
APP_PORT = config("APP_PORT", cast=int, default=8000)

LOG_LEVEL = config("LOG_LEVEL", cast=int, default=logging.WARNING)
CODE_HOTRELOAD = config("CODE_HOTRELOAD", cast=bool, default=False)

OSU_API_VERSION = config("OSU_API_VERSION", default="v1").lower()
OSU_API_KEY = config("OSU_API_KEY", default=None)
OSU_CLIENT_ID = config("OSU_CLIENT_ID", cast=int, default=None)
OSU_CLIENT_SECRET = config("OSU_CLIENT_SECRET", default=None)
OSU_API_TIMEOUT = config("OSU_API_TIMEOUT", cast=float, default=7.0)
OSU_API_RETRIES = config("OSU_API_RETRIES", cast=int, default=3)
