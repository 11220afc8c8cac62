from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from typing import Any
from typing import Optional

from osuwu.constants import mods as mods_codec
from osuwu.constants.beatmap import Genre
from osuwu.constants.beatmap import Language
from osuwu.constants.match import ScoringType
from osuwu.constants.match import Team
from osuwu.constants.match import TeamType
from osuwu.constants.mode import Mode
from osuwu.constants.ranked_status import RankedStatus
from osuwu.models.beatmap import Beatmap
from osuwu.models.beatmap import Cover
from osuwu.models.beatmap import DifficultyStats
from osuwu.models.beatmap import Mapper
from osuwu.models.beatmap import ObjectCounts
from osuwu.models.beatmap import StarRating
from osuwu.models.match import Match
from osuwu.models.match import MatchGame
from osuwu.models.match import MatchScore
from osuwu.models.match import Replay
from osuwu.models.score import Score
from osuwu.models.user import AVATAR_URL
from osuwu.models.user import GradeCount
from osuwu.models.user import GradeCounts
from osuwu.models.user import HitCountBreakdown
from osuwu.models.user import ScoreTotals
from osuwu.models.user import User
from osuwu.models.user import UserEvent
from osuwu.utils import countries
from osuwu.utils.datetime import parse_iso_date
from osuwu.utils.datetime import parse_legacy_date


def _int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default

    return int(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None

    return int(value)


def _float(value: Any, default: float = 0.0) -> float:
    if value is None or value == "":
        return default

    return float(value)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None

    return float(value)


def _flag(value: Any) -> bool:
    # the legacy api encodes booleans as "0" and "1"
    return str(value) == "1"


class ResponseShape(ABC):
    """Turns the raw json of one api version into the library's records."""

    @abstractmethod
    def beatmap(self, mapping: Mapping[str, Any]) -> Beatmap:
        ...

    @abstractmethod
    def user(self, mapping: Mapping[str, Any]) -> User:
        ...

    @abstractmethod
    def score(self, mapping: Mapping[str, Any]) -> Score:
        ...


class V1Shape(ResponseShape):
    def beatmap(self, mapping: Mapping[str, Any]) -> Beatmap:
        set_id = int(mapping["beatmapset_id"])

        genre_id = _optional_int(mapping.get("genre_id"))
        language_id = _optional_int(mapping.get("language_id"))

        tags = mapping.get("tags") or ""

        return Beatmap(
            beatmap_id=int(mapping["beatmap_id"]),
            beatmapset_id=set_id,
            difficulty_name=mapping["version"],
            difficulty_stats=DifficultyStats(
                cs=_float(mapping.get("diff_size")),
                od=_float(mapping.get("diff_overall")),
                ar=_float(mapping.get("diff_approach")),
                hp=_float(mapping.get("diff_drain")),
            ),
            stars=StarRating(
                overall=_float(mapping.get("difficultyrating")),
                aim=_optional_float(mapping.get("diff_aim")),
                speed=_optional_float(mapping.get("diff_speed")),
            ),
            artist=mapping["artist"],
            title=mapping["title"],
            mapper=Mapper(
                username=mapping["creator"],
                id=_optional_int(mapping.get("creator_id")),
            ),
            bpm=_float(mapping.get("bpm")),
            source=mapping.get("source") or "",
            tags=tuple(tags.split()),
            genre=Genre(genre_id).display_name if genre_id is not None else None,
            language=(
                Language(language_id).display_name if language_id is not None else None
            ),
            approved=RankedStatus(int(mapping["approved"])).display_name,
            mode=Mode(int(mapping["mode"])).display_name,
            play_count=_int(mapping.get("playcount")),
            pass_count=_int(mapping.get("passcount")),
            objects=ObjectCounts.from_counts(
                circles=_int(mapping.get("count_normal")),
                sliders=_int(mapping.get("count_slider")),
                spinners=_int(mapping.get("count_spinner")),
            ),
            cover=Cover.from_set_id(set_id),
            favourites=_int(mapping.get("favourite_count")),
            rating=_optional_float(mapping.get("rating")),
            max_combo=_optional_int(mapping.get("max_combo")),
            total_length_seconds=_float(mapping.get("total_length")),
            hit_length_seconds=_float(mapping.get("hit_length")),
            file_md5=mapping.get("file_md5") or "",
            submission_date=parse_legacy_date(mapping.get("submit_date")),
            approved_date=parse_legacy_date(mapping.get("approved_date")),
            last_update=parse_legacy_date(mapping.get("last_update")),
            storyboard=_flag(mapping.get("storyboard")),
            video=_flag(mapping.get("video")),
            download_unavailable=_flag(mapping.get("download_unavailable")),
            audio_unavailable=_flag(mapping.get("audio_unavailable")),
        )

    def user(self, mapping: Mapping[str, Any]) -> User:
        user_id = int(mapping["user_id"])
        play_count = _int(mapping.get("playcount"))
        total_score = _int(mapping.get("total_score"))
        country_code = mapping.get("country") or ""

        return User(
            user_id=user_id,
            username=mapping["username"],
            avatar_url=AVATAR_URL.format(user_id=user_id),
            join_date=parse_legacy_date(mapping.get("join_date")),
            hit_counts=HitCountBreakdown.from_counts(
                _int(mapping.get("count300")),
                _int(mapping.get("count100")),
                _int(mapping.get("count50")),
            ),
            play_count=play_count,
            level=_float(mapping.get("level")),
            rank=_optional_int(mapping.get("pp_rank")),
            country_rank=_optional_int(mapping.get("pp_country_rank")),
            pp=_float(mapping.get("pp_raw")),
            accuracy=_float(mapping.get("accuracy")),
            score=ScoreTotals.from_scores(
                total=total_score,
                ranked=_int(mapping.get("ranked_score")),
                play_count=play_count,
            ),
            grades=GradeCounts(
                ss=GradeCount.from_counts(
                    gold=_int(mapping.get("count_rank_ss")),
                    silver=_int(mapping.get("count_rank_ssh")),
                ),
                s=GradeCount.from_counts(
                    gold=_int(mapping.get("count_rank_s")),
                    silver=_int(mapping.get("count_rank_sh")),
                ),
                a=_int(mapping.get("count_rank_a")),
            ),
            country_code=country_code,
            country=countries.official_name(country_code),
            seconds_played=_int(mapping.get("total_seconds_played")),
            events=tuple(
                UserEvent(
                    html=event.get("display_html", ""),
                    beatmap_id=_optional_int(event.get("beatmap_id")),
                    beatmapset_id=_optional_int(event.get("beatmapset_id")),
                    date=parse_legacy_date(event.get("date")),
                    epic_factor=_int(event.get("epicfactor")),
                )
                for event in mapping.get("events") or []
            ),
        )

    def score(self, mapping: Mapping[str, Any]) -> Score:
        replay_available = mapping.get("replay_available")

        return Score(
            score=_int(mapping.get("score")),
            user_id=int(mapping["user_id"]),
            n300=_int(mapping.get("count300")),
            n100=_int(mapping.get("count100")),
            n50=_int(mapping.get("count50")),
            misses=_int(mapping.get("countmiss")),
            katus=_int(mapping.get("countkatu")),
            gekis=_int(mapping.get("countgeki")),
            max_combo=_int(mapping.get("maxcombo")),
            perfect_combo=_flag(mapping.get("perfect")),
            mods=mods_codec.normalize(_int(mapping.get("enabled_mods"))),
            date=parse_legacy_date(mapping.get("date")),
            rank=mapping.get("rank", ""),
            username=mapping.get("username"),
            beatmap_id=_optional_int(mapping.get("beatmap_id")),
            score_id=_optional_int(mapping.get("score_id")),
            pp=_optional_float(mapping.get("pp")),
            replay_available=(
                _flag(replay_available) if replay_available is not None else None
            ),
        )

    def match_score(self, mapping: Mapping[str, Any]) -> MatchScore:
        return MatchScore(
            slot=_int(mapping.get("slot")),
            team=Team(_int(mapping.get("team"))).display_name,
            user_id=int(mapping["user_id"]),
            score=_int(mapping.get("score")),
            max_combo=_int(mapping.get("maxcombo")),
            hit_counts=HitCountBreakdown.from_counts(
                _int(mapping.get("count300")),
                _int(mapping.get("count100")),
                _int(mapping.get("count50")),
            ),
            passed=_flag(mapping.get("pass")),
        )

    def match(self, mapping: Mapping[str, Any]) -> Match:
        match = mapping["match"]

        games = tuple(
            MatchGame(
                id=int(game["game_id"]),
                start_time=parse_legacy_date(game.get("start_time")),
                end_time=parse_legacy_date(game.get("end_time")),
                beatmap_id=int(game["beatmap_id"]),
                mode=Mode(_int(game.get("play_mode"))).display_name,
                scoring_type=ScoringType(_int(game.get("scoring_type"))).display_name,
                team_type=TeamType(_int(game.get("team_type"))).display_name,
                mods=mods_codec.normalize(_int(game.get("mods"))),
                scores=tuple(self.match_score(score) for score in game.get("scores") or []),
            )
            for game in mapping.get("games") or []
        )

        return Match(
            id=int(match["match_id"]),
            name=match["name"],
            start_time=parse_legacy_date(match.get("start_time")),
            end_time=parse_legacy_date(match.get("end_time")),
            games=games,
        )

    def replay(self, mapping: Mapping[str, Any]) -> Replay:
        return Replay(
            content=mapping["content"],
            encoding=mapping.get("encoding", "base64"),
        )


class V2Shape(ResponseShape):
    def beatmap(self, mapping: Mapping[str, Any]) -> Beatmap:
        beatmapset = mapping.get("beatmapset") or {}
        set_id = int(mapping["beatmapset_id"])

        genre = beatmapset.get("genre") or {}
        language = beatmapset.get("language") or {}
        availability = beatmapset.get("availability") or {}

        return Beatmap(
            beatmap_id=int(mapping["id"]),
            beatmapset_id=set_id,
            difficulty_name=mapping["version"],
            difficulty_stats=DifficultyStats(
                cs=_float(mapping.get("cs")),
                od=_float(mapping.get("accuracy")),
                ar=_float(mapping.get("ar")),
                hp=_float(mapping.get("drain")),
            ),
            stars=StarRating(overall=_float(mapping.get("difficulty_rating"))),
            artist=beatmapset.get("artist", ""),
            title=beatmapset.get("title", ""),
            mapper=Mapper(
                username=beatmapset.get("creator", ""),
                id=_optional_int(mapping.get("user_id")),
            ),
            bpm=_float(mapping.get("bpm")),
            source=beatmapset.get("source") or "",
            tags=tuple((beatmapset.get("tags") or "").split()),
            genre=genre.get("name"),
            language=language.get("name"),
            approved=RankedStatus.from_v2(mapping["status"]).display_name,
            mode=Mode.from_ruleset(mapping["mode"]).display_name,
            play_count=_int(mapping.get("playcount")),
            pass_count=_int(mapping.get("passcount")),
            objects=ObjectCounts.from_counts(
                circles=_int(mapping.get("count_circles")),
                sliders=_int(mapping.get("count_sliders")),
                spinners=_int(mapping.get("count_spinners")),
            ),
            cover=Cover.from_set_id(set_id),
            favourites=_int(beatmapset.get("favourite_count")),
            rating=_optional_float(beatmapset.get("rating")),
            max_combo=_optional_int(mapping.get("max_combo")),
            total_length_seconds=_float(mapping.get("total_length")),
            hit_length_seconds=_float(mapping.get("hit_length")),
            file_md5=mapping.get("checksum") or "",
            submission_date=parse_iso_date(beatmapset.get("submitted_date")),
            approved_date=parse_iso_date(beatmapset.get("ranked_date")),
            last_update=parse_iso_date(mapping.get("last_updated")),
            storyboard=bool(beatmapset.get("storyboard", False)),
            video=bool(beatmapset.get("video", False)),
            download_unavailable=bool(availability.get("download_disabled", False)),
            audio_unavailable=False,
        )

    def user(self, mapping: Mapping[str, Any]) -> User:
        statistics = mapping.get("statistics") or {}
        level = statistics.get("level") or {}
        grades = statistics.get("grade_counts") or {}

        play_count = _int(statistics.get("play_count"))
        total_score = _int(statistics.get("total_score"))
        country_code = mapping.get("country_code") or ""

        return User(
            user_id=int(mapping["id"]),
            username=mapping["username"],
            avatar_url=mapping.get("avatar_url") or AVATAR_URL.format(user_id=mapping["id"]),
            join_date=parse_iso_date(mapping.get("join_date")),
            hit_counts=HitCountBreakdown.from_counts(
                _int(statistics.get("count_300")),
                _int(statistics.get("count_100")),
                _int(statistics.get("count_50")),
            ),
            play_count=play_count,
            level=_float(level.get("current")) + _float(level.get("progress")) / 100.0,
            rank=_optional_int(statistics.get("global_rank")),
            country_rank=_optional_int(statistics.get("country_rank")),
            pp=_float(statistics.get("pp")),
            accuracy=_float(statistics.get("hit_accuracy")),
            score=ScoreTotals.from_scores(
                total=total_score,
                ranked=_int(statistics.get("ranked_score")),
                play_count=play_count,
            ),
            grades=GradeCounts(
                ss=GradeCount.from_counts(gold=_int(grades.get("ss")), silver=_int(grades.get("ssh"))),
                s=GradeCount.from_counts(gold=_int(grades.get("s")), silver=_int(grades.get("sh"))),
                a=_int(grades.get("a")),
            ),
            country_code=country_code,
            country=countries.official_name(country_code),
            seconds_played=_int(statistics.get("play_time")),
        )

    def score(self, mapping: Mapping[str, Any]) -> Score:
        statistics = mapping.get("statistics") or {}
        user = mapping.get("user") or {}
        beatmap = mapping.get("beatmap") or {}

        # legacy acronyms come as plain strings, newer payloads as objects
        mods = "".join(
            mod if isinstance(mod, str) else mod["acronym"]
            for mod in mapping.get("mods") or []
        )

        return Score(
            score=_int(mapping.get("score")),
            user_id=int(mapping["user_id"]),
            n300=_int(statistics.get("count_300")),
            n100=_int(statistics.get("count_100")),
            n50=_int(statistics.get("count_50")),
            misses=_int(statistics.get("count_miss")),
            katus=_int(statistics.get("count_katu")),
            gekis=_int(statistics.get("count_geki")),
            max_combo=_int(mapping.get("max_combo")),
            perfect_combo=bool(mapping.get("perfect", False)),
            mods=mods_codec.encode(mods),
            date=parse_iso_date(mapping.get("created_at")),
            rank=mapping.get("rank", ""),
            username=user.get("username"),
            beatmap_id=_optional_int(beatmap.get("id")),
            score_id=_optional_int(mapping.get("id")),
            pp=_optional_float(mapping.get("pp")),
            replay_available=mapping.get("replay"),
        )
