from __future__ import annotations

from dataclasses import asdict

from fastapi import Query
from fastapi import status
from fastapi.responses import ORJSONResponse

import osuwu.state
from osuwu.constants.mode import Mode


async def get_user(
    user: str,
    mode_arg: int = Query(0, alias="m", ge=0, le=3),
):
    # numeric lookups are treated as ids, anything else as a username
    lookup: int | str = int(user) if user.isdigit() else user

    result = await osuwu.state.services.osu_client.get_user(lookup, mode=Mode(mode_arg))
    if result is None:
        return ORJSONResponse(
            content={"status": 404, "message": "User not found."},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return ORJSONResponse(
        {
            "status": 200,
            "message": "ok",
            "result": asdict(result),
        },
    )
