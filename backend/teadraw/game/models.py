from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Union

from .strokes import StrokeLog
from .teams import Team


Role = Literal["painter", "guesser"]


@dataclass(frozen=True)
class GameSettings:
    round_duration_sec: int = 30
    reveal_duration_sec: int = 6
    max_rounds: int = 10
    tick_interval_sec: float = 1.0
    reset_scores_on_restart: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GameSettings":
        return cls(
            round_duration_sec=int(config.get("ROUND_DURATION_SEC", cls.round_duration_sec)),
            reveal_duration_sec=int(config.get("REVEAL_DURATION_SEC", cls.reveal_duration_sec)),
            max_rounds=int(config.get("MAX_ROUNDS", cls.max_rounds)),
            tick_interval_sec=float(config.get("TICK_INTERVAL_SEC", cls.tick_interval_sec)),
            reset_scores_on_restart=bool(config.get("RESET_SCORES_ON_RESTART", False)),
        )


@dataclass
class Player:
    id: str
    nickname: str
    team: Team
    joined_at: float

    def summary(self, score: int) -> dict:
        return {
            "id": self.id,
            "nickname": self.nickname,
            "teamId": self.team.id,
            "teamName": self.team.name,
            "teamImage": self.team.image,
            "teamColor": self.team.color,
            "score": score,
        }

    def to_dict(self, score: int, role: Role) -> dict:
        d = self.summary(score)
        d["role"] = role
        return d


@dataclass(frozen=True)
class CorrectGuess:
    guesser_id: str
    nickname: str
    team: Team
    elapsed_sec: int
    points: int
    order: int

    def to_dict(self) -> dict:
        return {
            "id": self.guesser_id,
            "nickname": self.nickname,
            "teamId": self.team.id,
            "teamName": self.team.name,
            "teamImage": self.team.image,
            "teamColor": self.team.color,
            "time": self.elapsed_sec,
            "points": self.points,
            "order": self.order,
        }


@dataclass
class Round:
    index: int
    painter_id: str
    word: str
    started_at: float
    strokes: StrokeLog = field(default_factory=StrokeLog)
    correct_guesses: list[CorrectGuess] = field(default_factory=list)

    def has_guessed(self, player_id: str) -> bool:
        return any(g.guesser_id == player_id for g in self.correct_guesses)


# Room phases. Only the phases that carry a round can hold a word or strokes.

@dataclass(frozen=True)
class Idle:
    pass


@dataclass
class Drawing:
    round: Round


@dataclass
class Reveal:
    round: Round


@dataclass
class Concluded:
    round_index: int


Phase = Union[Idle, Drawing, Reveal, Concluded]


@dataclass
class Room:
    id: str
    players: dict[str, Player] = field(default_factory=dict)
    scores: dict[str, int] = field(default_factory=dict)
    phase: Phase = field(default_factory=Idle)

    @property
    def current_round(self) -> Optional[Round]:
        if isinstance(self.phase, (Drawing, Reveal)):
            return self.phase.round
        return None

    @property
    def round_index(self) -> int:
        if isinstance(self.phase, Concluded):
            return self.phase.round_index
        rnd = self.current_round
        return rnd.index if rnd else 0

    @property
    def current_painter(self) -> Optional[str]:
        rnd = self.current_round
        if rnd and rnd.painter_id in self.players:
            return rnd.painter_id
        return None

    def role_of(self, player_id: str) -> Role:
        return "painter" if player_id == self.current_painter else "guesser"

    def guesser_ids(self) -> list[str]:
        painter = self.current_painter
        return [pid for pid in self.players if pid != painter]
