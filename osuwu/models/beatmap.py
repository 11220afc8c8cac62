from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

COVER_IMAGE_URL = "https://assets.ppy.sh/beatmaps/{set_id}/covers/cover.jpg"
COVER_THUMBNAIL_URL = "https://b.ppy.sh/thumb/{set_id}l.jpg"


@dataclass(frozen=True)
class DifficultyStats:
    cs: float
    od: float
    ar: float
    hp: float


@dataclass(frozen=True)
class StarRating:
    overall: float
    aim: Optional[float] = None
    speed: Optional[float] = None


@dataclass(frozen=True)
class ObjectCounts:
    circles: int
    sliders: int
    spinners: int
    total: int

    @classmethod
    def from_counts(cls, circles: int, sliders: int, spinners: int) -> ObjectCounts:
        return cls(
            circles=circles,
            sliders=sliders,
            spinners=spinners,
            total=circles + sliders + spinners,
        )


@dataclass(frozen=True)
class Mapper:
    username: str
    id: Optional[int] = None


@dataclass(frozen=True)
class Cover:
    image: str
    thumbnail: str

    @classmethod
    def from_set_id(cls, set_id: int) -> Cover:
        return cls(
            image=COVER_IMAGE_URL.format(set_id=set_id),
            thumbnail=COVER_THUMBNAIL_URL.format(set_id=set_id),
        )


@dataclass(frozen=True)
class BeatmapMetadata:
    """The subset of beatmap information used to label pp reports."""

    beatmap_id: int
    beatmapset_id: int
    artist: str
    title: str
    mapper: str
    difficulty_name: str


@dataclass(frozen=True)
class Beatmap:
    beatmap_id: int
    beatmapset_id: int
    difficulty_name: str
    difficulty_stats: DifficultyStats
    stars: StarRating

    artist: str
    title: str
    mapper: Mapper
    bpm: float
    source: str
    tags: tuple[str, ...]

    genre: Optional[str]
    language: Optional[str]
    approved: str
    mode: str

    play_count: int
    pass_count: int
    objects: ObjectCounts
    cover: Cover
    favourites: int
    rating: Optional[float]
    max_combo: Optional[int]

    total_length_seconds: float
    hit_length_seconds: float
    file_md5: str

    submission_date: Optional[datetime]
    approved_date: Optional[datetime]
    last_update: Optional[datetime]

    storyboard: bool
    video: bool
    download_unavailable: bool
    audio_unavailable: bool

    @property
    def pass_percentage(self) -> Optional[float]:
        # NOTE: this is plays over passes, as it has always been reported.
        # it is not the share of plays that passed.
        if self.pass_count == 0:
            return None

        return self.play_count / self.pass_count * 100.0

    @property
    def metadata(self) -> BeatmapMetadata:
        return BeatmapMetadata(
            beatmap_id=self.beatmap_id,
            beatmapset_id=self.beatmapset_id,
            artist=self.artist,
            title=self.title,
            mapper=self.mapper.username,
            difficulty_name=self.difficulty_name,
        )
