from __future__ import annotations

from dataclasses import asdict

from fastapi import Path
from fastapi import status
from fastapi.responses import ORJSONResponse

import osuwu.state


async def get_beatmap(beatmap_id: int = Path(..., ge=1)):
    beatmap = await osuwu.state.services.osu_client.get_beatmap(beatmap_id)
    if beatmap is None:
        return ORJSONResponse(
            content={"status": 404, "message": "Beatmap not found."},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return ORJSONResponse(
        {
            "status": 200,
            "message": "ok",
            "result": asdict(beatmap) | {"pass_percentage": beatmap.pass_percentage},
        },
    )
