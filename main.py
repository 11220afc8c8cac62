#!/usr/bin/env python3.11
from __future__ import annotations

import atexit

import uvicorn

import config
import osuwu.exception_handling
import osuwu.logging


def main() -> int:
    osuwu.logging.configure_logging(level=config.LOG_LEVEL)

    osuwu.exception_handling.hook_exception_handlers()
    atexit.register(osuwu.exception_handling.unhook_exception_handlers)

    uvicorn.run(
        "osuwu.init_api:asgi_app",
        reload=config.CODE_HOTRELOAD,
        log_level=config.LOG_LEVEL,
        server_header=False,
        date_header=False,
        host=config.APP_HOST,
        port=config.APP_PORT,
        access_log=False,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
