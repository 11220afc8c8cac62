from __future__ import annotations

import rosu_pp_py as rosu

from osuwu.constants.mods import Mods
from osuwu.exceptions import ParseError
from osuwu.models.chart import Chart
from osuwu.models.performance import DifficultyRating


def load_beatmap(chart: Chart) -> rosu.Beatmap:
    """Hands the chart's source text over to rosu-pp.

    Raises:
        ParseError: rosu-pp can't read a chart our own parser accepted.
    """

    try:
        return rosu.Beatmap(content=chart.document)
    except Exception as exc:
        raise ParseError(
            f"Difficulty calculator rejected the chart: {exc}",
            beatmap_id=chart.beatmap_id,
        ) from exc


def calculate_difficulty(chart: Chart, mods: Mods = Mods.NOMOD) -> DifficultyRating:
    """Calculates the star rating of a chart with the given modifiers.

    Ratings follow osu!stable, not lazer. A chart without hit objects is
    rated 0 on every axis.
    """

    mods = Mods(mods)

    # ar/od/cs/hp once hr, ez and the speed mods have been applied
    map_attributes = rosu.BeatmapAttributesBuilder(
        mods=int(mods),
        ar=chart.ar,
        od=chart.od,
        cs=chart.cs,
        hp=chart.hp,
    ).build()

    attributes = None
    aim = speed = total = 0.0
    if chart.hit_objects:
        attributes = rosu.Difficulty(mods=int(mods), lazer=False).calculate(
            load_beatmap(chart),
        )

        aim = attributes.aim
        speed = attributes.speed
        total = attributes.stars

    return DifficultyRating(
        total=total,
        aim=aim,
        speed=speed,
        mods=mods,
        speed_multiplier=mods.speed_multiplier,
        ar=map_attributes.ar,
        od=map_attributes.od,
        cs=map_attributes.cs,
        hp=map_attributes.hp,
        max_combo=chart.max_combo,
        object_count=chart.object_count,
        circle_count=chart.circle_count,
        slider_count=chart.slider_count,
        spinner_count=chart.spinner_count,
        attributes=attributes,
    )
