from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from osuwu.adapters.osu_api import ApiVersion
from osuwu.adapters.osu_api import ClientConfig
from osuwu.adapters.osu_api import OsuClient

SIMPLE_CHART = """\
osu file format v14

[General]
AudioFilename: audio.mp3
Mode: 0

[Editor]
DistanceSpacing: 1.2

[Metadata]
Title:Test Song
TitleUnicode:Test Song
Artist:Test Artist
ArtistUnicode:Test Artist
Creator:Mapper
Version:Normal
BeatmapID:123
BeatmapSetID:456

[Difficulty]
HPDrainRate:5
CircleSize:4
OverallDifficulty:8
ApproachRate:9
SliderMultiplier:1.4
SliderTickRate:1

[TimingPoints]
0,500,4,2,0,100,1,0

[HitObjects]
256,192,1000,1,0,0:0:0:0:
100,100,2000,2,0,L|200:100,1,140
256,192,3000,12,0,4000,0:0:0:0:
"""

V1_BEATMAP = {
    "beatmapset_id": "456",
    "beatmap_id": "123",
    "approved": "1",
    "total_length": "90",
    "hit_length": "85",
    "version": "Insane",
    "file_md5": "c8f08438e0a4fa5f3f1e3a86e8d1f7f2",
    "diff_size": "4",
    "diff_overall": "8",
    "diff_approach": "9",
    "diff_drain": "5",
    "mode": "0",
    "count_normal": "300",
    "count_slider": "120",
    "count_spinner": "2",
    "submit_date": "2013-05-15 11:32:26",
    "approved_date": "2013-07-06 08:54:46",
    "last_update": "2013-07-06 08:51:22",
    "artist": "Kenji Ninuma",
    "artist_unicode": None,
    "title": "DISCO PRINCE",
    "title_unicode": None,
    "creator": "peppy",
    "creator_id": "2",
    "bpm": "120",
    "source": "",
    "tags": "kenji ninuma disco",
    "genre_id": "2",
    "language_id": "3",
    "favourite_count": "121",
    "rating": "9.08",
    "storyboard": "0",
    "video": "1",
    "download_unavailable": "0",
    "audio_unavailable": "0",
    "playcount": "1000",
    "passcount": "250",
    "packs": None,
    "max_combo": "684",
    "diff_aim": "2.3",
    "diff_speed": "2.1",
    "difficultyrating": "4.6",
}

V1_USER = {
    "user_id": "2",
    "username": "peppy",
    "join_date": "2007-08-28 03:09:12",
    "count300": "600",
    "count100": "300",
    "count50": "100",
    "playcount": "10",
    "ranked_score": "600",
    "total_score": "1000",
    "pp_rank": "12345",
    "level": "65.5",
    "pp_raw": "1234.5",
    "accuracy": "96.5",
    "count_rank_ss": "3",
    "count_rank_ssh": "2",
    "count_rank_s": "10",
    "count_rank_sh": "5",
    "count_rank_a": "40",
    "country": "AU",
    "total_seconds_played": "3600",
    "pp_country_rank": "100",
    "events": [
        {
            "display_html": "<b>peppy</b> achieved rank #1",
            "beatmap_id": "123",
            "beatmapset_id": "456",
            "date": "2020-01-01 00:00:00",
            "epicfactor": "1",
        },
    ],
}

V1_SCORE = {
    "beatmap_id": "123",
    "score_id": "7",
    "score": "1000000",
    "maxcombo": "684",
    "count50": "0",
    "count100": "3",
    "count300": "419",
    "countmiss": "0",
    "countkatu": "2",
    "countgeki": "80",
    "perfect": "1",
    "enabled_mods": "72",
    "user_id": "2",
    "date": "2020-01-01 12:00:00",
    "rank": "SH",
    "pp": "321.5",
    "replay_available": "1",
}

V2_BEATMAP = {
    "id": 123,
    "beatmapset_id": 456,
    "version": "Insane",
    "cs": 4,
    "accuracy": 8,
    "ar": 9,
    "drain": 5,
    "difficulty_rating": 4.6,
    "mode": "osu",
    "status": "ranked",
    "playcount": 1000,
    "passcount": 0,
    "count_circles": 300,
    "count_sliders": 120,
    "count_spinners": 2,
    "total_length": 90,
    "hit_length": 85,
    "checksum": "c8f08438e0a4fa5f3f1e3a86e8d1f7f2",
    "last_updated": "2013-07-06T08:51:22+00:00",
    "bpm": 120,
    "max_combo": 684,
    "user_id": 2,
    "beatmapset": {
        "artist": "Kenji Ninuma",
        "title": "DISCO PRINCE",
        "creator": "peppy",
        "source": "",
        "tags": "kenji ninuma",
        "favourite_count": 121,
        "submitted_date": "2013-05-15T11:32:26Z",
        "ranked_date": "2013-07-06T08:54:46Z",
        "storyboard": False,
        "video": True,
        "availability": {"download_disabled": False},
    },
}

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(
    handler: Handler,
    *,
    api_version: ApiVersion = ApiVersion.V1,
    **overrides: Any,
) -> OsuClient:
    options: dict[str, Any] = {"retry_wait": 0.0}
    if api_version is ApiVersion.V1:
        options["api_key"] = "secret-key"
    else:
        options["client_id"] = 1234
        options["client_secret"] = "client-secret"

    options.update(overrides)

    return OsuClient(
        ClientConfig(api_version=api_version, **options),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def simple_chart_text() -> str:
    return SIMPLE_CHART
