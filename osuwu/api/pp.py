from __future__ import annotations

import logging
from typing import Optional

from fastapi import Query
from fastapi.responses import ORJSONResponse

import osuwu.state
import osuwu.usecases.performance
from osuwu.usecases.performance import COMMON_PP_PERCENTAGES


def _parse_mods(mods_arg: str) -> int | str:
    # both the bitmask and the token string are accepted
    if mods_arg.isdigit():
        return int(mods_arg)

    return mods_arg


async def calculate_pp(
    beatmap_id: int = Query(..., alias="b"),
    mods_arg: str = Query("0", alias="m"),
    acc: Optional[float] = Query(None, alias="a"),
    combo: Optional[int] = Query(None, alias="max_combo"),
    misses: int = Query(0, alias="x"),
):
    mods = _parse_mods(mods_arg)
    client = osuwu.state.services.osu_client

    if acc is None:
        reports = await osuwu.usecases.performance.calculate_pp_for_accuracies(
            client,
            beatmap_id,
            accuracies=COMMON_PP_PERCENTAGES,
            mods=mods,
            combo=combo,
            misses=misses,
        )

        logging.info(
            "Handled PP calculation API request",
            extra={"beatmap_id": beatmap_id, "mods": reports[0].mods},
        )

        return ORJSONResponse(
            {
                "status": 200,
                "message": "ok",
                "results": [report.to_dict() for report in reports],
            },
        )

    report = await osuwu.usecases.performance.calculate_pp(
        client,
        beatmap_id,
        mods=mods,
        combo=combo,
        misses=misses,
        accuracy=acc,
    )

    logging.info(
        "Handled PP calculation API request",
        extra={"beatmap_id": beatmap_id, "mods": report.mods},
    )

    return ORJSONResponse(
        {
            "status": 200,
            "message": "ok",
            "result": report.to_dict(),
        },
    )
