from __future__ import annotations

import asyncio
import logging
import sys
import threading
from collections.abc import Callable
from types import TracebackType
from typing import Any

from osuwu.exceptions import OsuwuError

ExceptionHook = Callable[
    [type[BaseException], BaseException, TracebackType | None],
    Any,
]
ThreadingExceptionHook = Callable[[threading.ExceptHookArgs], Any]

_default_excepthook: ExceptionHook | None = None
_default_threading_excepthook: ThreadingExceptionHook | None = None


def _error_context(exc_value: BaseException | None) -> dict[str, Any]:
    context: dict[str, Any] = {"error_type": type(exc_value).__name__}

    # library errors carry the beatmap/token/field they were raised for
    if isinstance(exc_value, OsuwuError):
        context["error_details"] = {
            key: value for key, value in vars(exc_value).items() if not key.startswith("_")
        }

    return context


def internal_exception_handler(
    exc_type: type[BaseException],
    exc_value: BaseException,
    exc_traceback: TracebackType | None,
) -> None:
    logging.exception(
        "An unhandled exception occurred",
        exc_info=(exc_type, exc_value, exc_traceback),
        extra=_error_context(exc_value),
    )


def internal_thread_exception_handler(
    args: threading.ExceptHookArgs,
) -> None:
    if args.exc_value is None:  # pragma: no cover
        logging.warning("Exception hook called without exception value.")
        return

    logging.exception(
        "An unhandled exception occurred in a thread",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        extra={"thread_name": getattr(args.thread, "name", None)}
        | _error_context(args.exc_value),
    )


def internal_loop_exception_handler(
    loop: asyncio.AbstractEventLoop,
    context: dict[str, Any],
) -> None:
    exception = context.get("exception")
    if exception is None:
        logging.error(context["message"])
        return

    logging.error(
        context["message"],
        exc_info=(type(exception), exception, exception.__traceback__),
        extra=_error_context(exception),
    )


def hook_exception_handlers() -> None:
    global _default_excepthook
    _default_excepthook = sys.excepthook
    sys.excepthook = internal_exception_handler

    global _default_threading_excepthook
    _default_threading_excepthook = threading.excepthook
    threading.excepthook = internal_thread_exception_handler


def hook_loop_exception_handler(loop: asyncio.AbstractEventLoop) -> None:
    loop.set_exception_handler(internal_loop_exception_handler)


def unhook_exception_handlers() -> None:
    global _default_excepthook
    if _default_excepthook is not None:
        sys.excepthook = _default_excepthook

    global _default_threading_excepthook
    if _default_threading_excepthook is not None:
        threading.excepthook = _default_threading_excepthook
