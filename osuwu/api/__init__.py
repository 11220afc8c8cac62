from __future__ import annotations

from fastapi import APIRouter
from fastapi import Response
from fastapi.responses import ORJSONResponse

from . import beatmaps
from . import pp
from . import users

router = APIRouter(default_response_class=Response)


@router.get("/_health")
async def healthcheck():
    return ORJSONResponse({"status": "ok"})


router.add_api_route("/api/v1/pp", pp.calculate_pp)
router.add_api_route("/api/v1/beatmaps/{beatmap_id}", beatmaps.get_beatmap)
router.add_api_route("/api/v1/users/{user}", users.get_user)
