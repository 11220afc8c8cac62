from __future__ import annotations

import asyncio
import logging
import sys
import threading

import httpx
import pytest

import osuwu.exception_handling
import osuwu.logging
from conftest import V1_BEATMAP
from conftest import make_client
from osuwu.exceptions import NotFoundError


async def test_rate_limit_honours_retry_after():
    responses = iter(
        [
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, json=[V1_BEATMAP]),
        ],
    )

    client = make_client(lambda request: next(responses), retries=2)

    assert await client.get_beatmap(123) is not None


async def test_other_status_errors_are_not_retried():
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        return httpx.Response(500)

    client = make_client(handler, retries=3)

    with pytest.raises(httpx.HTTPStatusError):
        await client.get_beatmaps()

    assert attempts == 1


def test_hooks_are_restored():
    original_excepthook = sys.excepthook
    original_threading_excepthook = threading.excepthook

    osuwu.exception_handling.hook_exception_handlers()
    assert sys.excepthook is osuwu.exception_handling.internal_exception_handler

    osuwu.exception_handling.unhook_exception_handlers()
    assert sys.excepthook is original_excepthook
    assert threading.excepthook is original_threading_excepthook


def test_loop_handler_logs_library_context(caplog: pytest.LogCaptureFixture):
    loop = asyncio.new_event_loop()
    try:
        osuwu.exception_handling.hook_loop_exception_handler(loop)

        with caplog.at_level(logging.ERROR):
            loop.call_exception_handler(
                {"message": "Task exception was never retrieved", "exception": NotFoundError(5)},
            )
    finally:
        loop.close()

    [record] = caplog.records
    assert record.error_type == "NotFoundError"
    assert record.error_details == {"beatmap_id": 5}


def test_configure_logging_applies_level(tmp_path):
    config_file = tmp_path / "logging.yaml"
    config_file.write_text("version: 1\ndisable_existing_loggers: false\n")

    root = logging.getLogger()
    original_level = root.level
    try:
        osuwu.logging.configure_logging(str(config_file), level=logging.ERROR)
        assert root.level == logging.ERROR
    finally:
        root.setLevel(original_level)
