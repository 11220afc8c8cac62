from __future__ import annotations

from osuwu.adapters.osu_api import OsuClient

osu_client: OsuClient
