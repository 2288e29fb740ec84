from __future__ import annotations

import logging
import random
import time
from threading import RLock
from typing import Any, Callable, Optional, Protocol

from . import scoring
from .clock import RoundClock, Scheduler, TimerHandle
from .leaderboard import Leaderboard
from .models import (
    Concluded,
    CorrectGuess,
    Drawing,
    GameSettings,
    Idle,
    Phase,
    Player,
    Reveal,
    Room,
    Round,
)
from .strokes import InvalidStroke, parse_stroke
from .teams import get_team
from .words import DEFAULT_WORDS_ZH, normalize_guess, pick_word


logger = logging.getLogger(__name__)

MASKED_GUESS = "✓✓✓"
MSG_PAINTER_CANNOT_GUESS = "你是畫畫者，不能猜題"
MSG_WRONG_GUESS = "答案不對，再試試看！"
FALLBACK_PAINTER_NICKNAME = "畫畫者"


class Gateway(Protocol):
    def to_room(self, room_id: str, event: str, payload: dict, skip_sid: Optional[str] = None) -> None:
        ...

    def to_player(self, player_id: str, event: str, payload: dict) -> None:
        ...


def next_painter(roster: list[str], current_painter_id: Optional[str]) -> Optional[str]:
    """Member after the current painter in join order, wrapping around.

    Falls back to the first member when the painter is no longer in the roster.
    """
    if not roster:
        return None
    if current_painter_id not in roster:
        return roster[0]
    idx = roster.index(current_painter_id)
    return roster[(idx + 1) % len(roster)]


class GameSession:
    """One room's round state machine.

    Every public method and every timer callback runs under the room lock, so
    handlers for the same room never interleave.
    """

    def __init__(
        self,
        room_id: str,
        gateway: Gateway,
        scheduler: Scheduler,
        leaderboard: Leaderboard,
        settings: Optional[GameSettings] = None,
        *,
        words: Optional[list[str]] = None,
        rng: Optional[random.Random] = None,
        time_fn: Callable[[], float] = time.time,
    ) -> None:
        self.room = Room(id=room_id)
        self.settings = settings or GameSettings()
        self._gateway = gateway
        self._scheduler = scheduler
        self._leaderboard = leaderboard
        self._words = list(words or DEFAULT_WORDS_ZH)
        self._rng = rng
        self._time_fn = time_fn
        self._lock = RLock()
        self._clock: Optional[RoundClock] = None
        self._reveal_timer: Optional[TimerHandle] = None

    @property
    def room_id(self) -> str:
        return self.room.id

    @property
    def phase(self) -> Phase:
        return self.room.phase

    @property
    def clock_running(self) -> bool:
        return self._clock is not None and self._clock.running

    def _now(self) -> float:
        return self._time_fn()

    # --- snapshots -------------------------------------------------------

    def time_remaining(self) -> int:
        phase = self.room.phase
        if isinstance(phase, Drawing) and self._clock is not None and self._clock.running:
            return self._clock.remaining()
        if isinstance(phase, (Reveal, Concluded)):
            return 0
        return self.settings.round_duration_sec

    def snapshot(self) -> dict:
        with self._lock:
            room = self.room
            rnd = room.current_round
            return {
                "players": [
                    p.to_dict(room.scores.get(pid, 0), room.role_of(pid))
                    for pid, p in room.players.items()
                ],
                "currentPainter": room.current_painter,
                "round": room.round_index,
                "timeRemaining": self.time_remaining(),
                "strokes": rnd.strokes.to_list() if rnd else [],
                "wordLength": len(rnd.word) if rnd else 0,
            }

    def _broadcast_state(self) -> None:
        self._gateway.to_room(self.room.id, "room-state", self.snapshot())

    # --- client actions --------------------------------------------------

    def join(self, player_id: str, nickname: str, team_id: Optional[str] = None) -> Player:
        with self._lock:
            room = self.room
            team = get_team(team_id)

            player = room.players.get(player_id)
            if player is None:
                player = Player(id=player_id, nickname=nickname, team=team, joined_at=self._now())
                room.players[player_id] = player
                room.scores.setdefault(player_id, 0)
            else:
                player.nickname = nickname
                player.team = team

            logger.info("%s joined room %s (%d players)", nickname, room.id, len(room.players))

            if isinstance(room.phase, Idle):
                self._begin_round(painter_id=player_id, index=1)
            elif isinstance(room.phase, Drawing) and not self.clock_running:
                # Recovered from a gap with no clock: keep the round, restart the countdown.
                clock = self._start_clock()
                room.phase.round.started_at = clock.started_at

            self._broadcast_state()
            rnd = room.current_round
            if rnd is not None and isinstance(room.phase, Drawing) and rnd.painter_id == player_id:
                self._gateway.to_player(player_id, "your-turn-to-draw", {"word": rnd.word})
            return player

    def submit_stroke(self, player_id: str, payload: Any) -> bool:
        with self._lock:
            phase = self.room.phase
            if not isinstance(phase, Drawing) or phase.round.painter_id != player_id:
                logger.debug("Ignoring stroke from non-painter %s", player_id)
                return False

            try:
                stroke = parse_stroke(payload, timestamp=self._now())
            except InvalidStroke as exc:
                logger.debug("Dropping malformed stroke from %s: %s", player_id, exc)
                return False

            phase.round.strokes.append(stroke)
            self._gateway.to_room(self.room.id, "stroke-received", stroke.to_payload(), skip_sid=player_id)
            return True

    def clear_canvas(self, player_id: str) -> bool:
        with self._lock:
            phase = self.room.phase
            if not isinstance(phase, Drawing) or phase.round.painter_id != player_id:
                return False

            phase.round.strokes.clear()
            self._gateway.to_room(self.room.id, "canvas-cleared", {})
            return True

    def submit_guess(self, player_id: str, guess: Any) -> bool:
        """Returns True only when the guess was correct and scored."""
        with self._lock:
            room = self.room
            phase = room.phase
            if player_id not in room.players or not isinstance(phase, Drawing):
                return False

            rnd = phase.round
            if player_id == rnd.painter_id:
                self._gateway.to_player(
                    player_id, "guess-result", {"correct": False, "message": MSG_PAINTER_CANNOT_GUESS}
                )
                return False
            if not rnd.word or not isinstance(guess, str):
                return False

            guesser = room.players[player_id]
            correct = normalize_guess(guess) == normalize_guess(rnd.word)

            self._gateway.to_room(
                room.id,
                "guess-bubble",
                {
                    "userId": player_id,
                    "nickname": guesser.nickname,
                    "text": MASKED_GUESS if correct else guess,
                    "correct": correct,
                },
            )

            if not correct:
                self._gateway.to_player(player_id, "guess-result", {"correct": False, "message": MSG_WRONG_GUESS})
                return False
            if rnd.has_guessed(player_id):
                return False

            remaining = scoring.seconds_remaining(self.settings.round_duration_sec, rnd.started_at, self._now())
            points = scoring.guess_points(remaining)
            rnd.correct_guesses.append(
                CorrectGuess(
                    guesser_id=player_id,
                    nickname=guesser.nickname,
                    team=guesser.team,
                    elapsed_sec=self.settings.round_duration_sec - remaining,
                    points=points,
                    order=len(rnd.correct_guesses) + 1,
                )
            )
            room.scores[player_id] = room.scores.get(player_id, 0) + points
            room.scores[rnd.painter_id] = room.scores.get(rnd.painter_id, 0) + scoring.painter_bonus()

            logger.info("%s guessed '%s' in room %s for %d points", guesser.nickname, rnd.word, room.id, points)

            self._gateway.to_room(
                room.id,
                "guess-result",
                {
                    "correct": True,
                    "guesserId": player_id,
                    "guesserNickname": guesser.nickname,
                    "word": rnd.word,
                    "points": points,
                },
            )
            self._broadcast_state()

            guessers = room.guesser_ids()
            if guessers and all(rnd.has_guessed(pid) for pid in guessers):
                logger.info("All guessers got round %d in room %s, revealing early", rnd.index, room.id)
                self._cancel_clock()
                self._enter_reveal()
            return True

    def restart(self) -> bool:
        with self._lock:
            room = self.room
            self._cancel_clock()
            self._cancel_reveal_timer()
            room.phase = Idle()
            if self.settings.reset_scores_on_restart:
                room.scores = {pid: 0 for pid in room.players}

            logger.info("Room %s restarted", room.id)
            if not room.players:
                return False

            painter_id = next(iter(room.players))
            rnd = self._begin_round(painter_id=painter_id, index=1)

            self._gateway.to_room(
                room.id,
                "game-restart",
                {"round": rnd.index, "painterId": painter_id, "painterNickname": room.players[painter_id].nickname},
            )
            self._gateway.to_player(painter_id, "your-turn-to-draw", {"word": rnd.word})
            self._broadcast_state()
            return True

    def leave(self, player_id: str) -> bool:
        with self._lock:
            room = self.room
            player = room.players.pop(player_id, None)
            if player is None:
                return False
            room.scores.pop(player_id, None)

            phase = room.phase
            was_painting = isinstance(phase, Drawing) and phase.round.painter_id == player_id
            logger.info("%s left room %s (%d players)", player.nickname, room.id, len(room.players))

            if not room.players:
                self._go_idle()
                return True

            if was_painting:
                # Hand off straight away; the vanished painter's word is never revealed.
                self._cancel_clock()
                logger.info("Painter left room %s, handing off", room.id)
                self._next_round()
            else:
                self._broadcast_state()
            return True

    # --- transitions -----------------------------------------------------

    def _begin_round(self, painter_id: str, index: int) -> Round:
        rnd = Round(
            index=index,
            painter_id=painter_id,
            word=pick_word(self._words, self._rng),
            started_at=self._now(),
        )
        self.room.phase = Drawing(rnd)
        clock = self._start_clock()
        rnd.started_at = clock.started_at
        logger.info("Round %d started in room %s, painter %s", index, self.room.id, painter_id)
        return rnd

    def _enter_reveal(self) -> None:
        room = self.room
        rnd = room.current_round
        if rnd is None:
            return
        room.phase = Reveal(rnd)

        painter = room.players.get(rnd.painter_id)
        self._gateway.to_room(
            room.id,
            "answer-reveal",
            {
                "answer": rnd.word,
                "painter": {
                    "id": painter.id if painter else None,
                    "nickname": painter.nickname if painter else FALLBACK_PAINTER_NICKNAME,
                    "teamName": painter.team.name if painter else None,
                    "teamImage": painter.team.image if painter else None,
                },
                "correctGuessers": [g.to_dict() for g in sorted(rnd.correct_guesses, key=lambda g: g.order)],
                "totalGuessers": len([pid for pid in room.players if pid != rnd.painter_id]),
            },
        )
        logger.info(
            "Revealing '%s' in room %s, %d guessed correctly", rnd.word, room.id, len(rnd.correct_guesses)
        )

        self._cancel_reveal_timer()
        self._reveal_timer = self._scheduler.call_later(
            self.settings.reveal_duration_sec, self._on_reveal_timeout, rnd
        )

    def _next_round(self) -> None:
        room = self.room
        if not room.players:
            self._go_idle()
            return
        if room.round_index >= self.settings.max_rounds:
            self._conclude()
            return

        previous = room.current_round
        painter_id = next_painter(list(room.players), previous.painter_id if previous else None)
        rnd = self._begin_round(painter_id=painter_id, index=room.round_index + 1)

        self._gateway.to_room(
            room.id,
            "round-start",
            {"round": rnd.index, "painterId": painter_id, "painterNickname": room.players[painter_id].nickname},
        )
        self._gateway.to_player(painter_id, "your-turn-to-draw", {"word": rnd.word})
        self._broadcast_state()

    def _conclude(self) -> None:
        room = self.room
        self._cancel_clock()
        self._cancel_reveal_timer()

        final_players = sorted(
            (p.summary(room.scores.get(pid, 0)) for pid, p in room.players.items()),
            key=lambda p: p["score"],
            reverse=True,
        )
        current_team_scores = self._leaderboard.record_game(final_players)
        room.phase = Concluded(round_index=room.round_index)

        logger.info("Game over in room %s after %d rounds", room.id, room.round_index)
        self._gateway.to_room(
            room.id,
            "game-over",
            {
                "finalPlayers": final_players,
                "globalLeaderboard": self._leaderboard.top_players(),
                "teamRankings": self._leaderboard.team_rankings(),
                "currentTeamScores": current_team_scores,
            },
        )
        self._broadcast_state()

    def _go_idle(self) -> None:
        self._cancel_clock()
        self._cancel_reveal_timer()
        self.room.phase = Idle()
        logger.info("Room %s is now idle", self.room.id)

    # --- timers ----------------------------------------------------------

    def _start_clock(self) -> RoundClock:
        self._cancel_clock()
        clock = RoundClock(
            self._scheduler,
            self.settings.round_duration_sec,
            self._on_clock_tick,
            self._on_clock_expire,
            interval_sec=self.settings.tick_interval_sec,
            time_fn=self._time_fn,
            lock=self._lock,
        )
        self._clock = clock
        clock.start()
        return clock

    def _cancel_clock(self) -> None:
        if self._clock is not None:
            self._clock.cancel()
            self._clock = None

    def _cancel_reveal_timer(self) -> None:
        if self._reveal_timer is not None:
            self._reveal_timer.cancel()
            self._reveal_timer = None

    def _on_clock_tick(self, clock: RoundClock, remaining: int) -> None:
        if clock is not self._clock:
            return
        self._gateway.to_room(self.room.id, "timer-update", {"remaining": remaining})

    def _on_clock_expire(self, clock: RoundClock) -> None:
        if clock is not self._clock:
            return
        self._clock = None
        if isinstance(self.room.phase, Drawing):
            logger.info("Round %d timed out in room %s", self.room.phase.round.index, self.room.id)
            self._enter_reveal()

    def _on_reveal_timeout(self, rnd: Round) -> None:
        with self._lock:
            phase = self.room.phase
            if not isinstance(phase, Reveal) or phase.round is not rnd:
                return
            self._reveal_timer = None
            self._next_round()
