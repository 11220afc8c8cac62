from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

import rosu_pp_py as rosu

from osuwu.constants import mods as mods_codec
from osuwu.exceptions import InvalidPlayResultError
from osuwu.models.beatmap import BeatmapMetadata
from osuwu.models.chart import Chart
from osuwu.models.performance import DifficultyRating
from osuwu.models.performance import HitCounts
from osuwu.models.performance import PerformanceReport
from osuwu.models.performance import PerformanceResult
from osuwu.models.performance import PlayResult
from osuwu.usecases.chart import parse_chart
from osuwu.usecases.difficulty import calculate_difficulty

if TYPE_CHECKING:
    from osuwu.adapters.osu_api import OsuClient

# the accuracies reported when a caller doesn't ask for a specific one
COMMON_PP_PERCENTAGES = (100.0, 99.0, 98.0, 95.0)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def reconstruct_hit_counts(
    accuracy: float,
    object_count: int,
    misses: int = 0,
) -> HitCounts:
    """Finds the 300/100/50 distribution closest to the given accuracy.

    The accuracy (a percentage) is clamped to the best one reachable with the
    given amount of misses. 100s are preferred, and 50s are only used when
    100s alone can't get low enough.
    """

    misses = max(0, min(object_count, misses))
    max300 = object_count - misses

    max_accuracy = HitCounts(n300=max300, n100=0, n50=0, nmiss=misses).accuracy * 100.0
    accuracy = max(0.0, min(max_accuracy, accuracy))

    # (acc - 1) * N + misses is minus the amount of 300s lost to non-misses,
    # weighted by how much each judgement loses (a 100 loses 2/3, a 50 loses 5/6)
    lost = (accuracy / 100.0 - 1.0) * object_count + misses

    n50 = 0
    n100 = round_half_up(-1.5 * lost)

    if n100 > object_count - misses:
        n100 = 0
        n50 = min(max300, round_half_up(-3.0 * lost))
    else:
        n100 = min(max300, n100)

    n300 = object_count - n100 - n50 - misses

    return HitCounts(n300=n300, n100=n100, n50=n50, nmiss=misses)


def _validate_play(rating: DifficultyRating, play: PlayResult) -> None:
    if not 0.0 <= play.accuracy <= 100.0:
        raise InvalidPlayResultError(
            "accuracy",
            play.accuracy,
            "must be between 0 and 100",
        )

    if play.misses < 0:
        raise InvalidPlayResultError("misses", play.misses, "must not be negative")

    if play.misses > rating.object_count:
        raise InvalidPlayResultError(
            "misses",
            play.misses,
            f"the chart only has {rating.object_count} objects",
        )

    if play.combo is not None and play.combo < 0:
        raise InvalidPlayResultError("combo", play.combo, "must not be negative")


def calculate_performance(
    rating: DifficultyRating,
    play: PlayResult = PlayResult(),
) -> PerformanceResult:
    """Calculates the pp of a play, given the difficulty of its chart.

    The play's accuracy is turned into hit counts first, so the result
    reports exactly which judgements were rated.

    Raises:
        InvalidPlayResultError: The accuracy isn't a percentage, or the miss
            count or combo can't exist on the chart.
    """

    _validate_play(rating, play)

    if play.combo is None:
        combo = rating.max_combo
    else:
        combo = min(play.combo, rating.max_combo)

    hit_counts = reconstruct_hit_counts(play.accuracy, rating.object_count, play.misses)

    # nothing to hit, nothing to earn
    if rating.attributes is None:
        return PerformanceResult(
            total=0.0,
            aim=0.0,
            speed=0.0,
            accuracy=0.0,
            hit_counts=hit_counts,
            combo=combo,
            computed_accuracy=hit_counts.accuracy * 100.0,
        )

    attributes = rosu.Performance(
        mods=int(rating.mods),
        lazer=False,
        n300=hit_counts.n300,
        n100=hit_counts.n100,
        n50=hit_counts.n50,
        misses=hit_counts.nmiss,
        combo=combo,
    ).calculate(rating.attributes)

    return PerformanceResult(
        total=attributes.pp,
        aim=attributes.pp_aim or 0.0,
        speed=attributes.pp_speed or 0.0,
        accuracy=attributes.pp_accuracy or 0.0,
        hit_counts=hit_counts,
        combo=combo,
        computed_accuracy=hit_counts.accuracy * 100.0,
    )


def build_report(
    chart: Chart,
    rating: DifficultyRating,
    play: PlayResult,
    performance: PerformanceResult,
    *,
    beatmap_id: int,
    metadata: Optional[BeatmapMetadata] = None,
) -> PerformanceReport:
    if metadata is not None:
        artist = metadata.artist
        title = metadata.title
        mapper = metadata.mapper
        difficulty_name = metadata.difficulty_name
        beatmapset_id: Optional[int] = metadata.beatmapset_id
    else:
        artist = chart.artist
        title = chart.title
        mapper = chart.creator
        difficulty_name = chart.version
        beatmapset_id = chart.beatmapset_id

    return PerformanceReport(
        artist=artist,
        title=title,
        mapper=mapper,
        difficulty_name=difficulty_name,
        beatmap_id=beatmap_id,
        beatmapset_id=beatmapset_id,
        # as written in the chart, before any modifier
        cs=chart.cs,
        ar=chart.ar,
        od=chart.od,
        hp=chart.hp,
        circle_count=rating.circle_count,
        slider_count=rating.slider_count,
        spinner_count=rating.spinner_count,
        object_count=rating.object_count,
        stars=rating,
        mods=mods_codec.decode(rating.mods),
        combo=performance.combo,
        max_combo=rating.max_combo,
        accuracy=play.accuracy,
        pp=performance,
    )


async def calculate_pp_for_accuracies(
    client: OsuClient,
    beatmap_id: int,
    *,
    accuracies: Iterable[float] = COMMON_PP_PERCENTAGES,
    mods: Union[int, str, None] = 0,
    combo: Optional[int] = None,
    misses: int = 0,
) -> list[PerformanceReport]:
    """Downloads a chart once and reports the pp for every given accuracy."""

    mods = mods_codec.normalize(mods)

    document = await client.fetch_chart_document(beatmap_id)
    chart = parse_chart(document, beatmap_id=beatmap_id)
    rating = calculate_difficulty(chart, mods)

    plays = [
        PlayResult(combo=combo, misses=misses, accuracy=accuracy)
        for accuracy in accuracies
    ]
    performances = [calculate_performance(rating, play) for play in plays]

    # the chart itself carries enough metadata when the lookup fails
    metadata = await client.fetch_beatmap_metadata(beatmap_id)
    if metadata is None:
        logging.warning(
            "Falling back to chart metadata for pp report",
            extra={"beatmap_id": beatmap_id},
        )

    return [
        build_report(
            chart,
            rating,
            play,
            performance,
            beatmap_id=beatmap_id,
            metadata=metadata,
        )
        for play, performance in zip(plays, performances)
    ]


async def calculate_pp(
    client: OsuClient,
    beatmap_id: int,
    *,
    mods: Union[int, str, None] = 0,
    combo: Optional[int] = None,
    misses: int = 0,
    accuracy: float = 100.0,
) -> PerformanceReport:
    """Downloads, parses and rates a chart, then calculates the pp of a play
    on it.

    Raises:
        UnknownModifierError: `mods` contains an unknown token.
        NotFoundError: There is no chart with the given id.
        ParseError: The downloaded chart is malformed.
        InvalidPlayResultError: The play can't exist on the chart.
    """

    reports = await calculate_pp_for_accuracies(
        client,
        beatmap_id,
        accuracies=(accuracy,),
        mods=mods,
        combo=combo,
        misses=misses,
    )
    return reports[0]


@dataclass(frozen=True)
class PerformanceRequest:
    beatmap_id: int
    mods: Union[int, str, None] = 0
    combo: Optional[int] = None
    misses: int = 0
    accuracy: float = 100.0


async def calculate_pps(
    client: OsuClient,
    requests: Sequence[PerformanceRequest],
) -> list[PerformanceReport]:
    """Runs independent calculations concurrently, keeping the input order."""

    return list(
        await asyncio.gather(
            *[
                calculate_pp(
                    client,
                    request.beatmap_id,
                    mods=request.mods,
                    combo=request.combo,
                    misses=request.misses,
                    accuracy=request.accuracy,
                )
                for request in requests
            ],
        ),
    )
