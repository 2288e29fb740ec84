from __future__ import annotations

BASE_POINTS = 50
POINTS_PER_SECOND_LEFT = 2
PAINTER_BONUS = 30


def seconds_elapsed(started_at: float, now: float) -> int:
    return max(0, int(now - started_at))


def seconds_remaining(duration_sec: int, started_at: float, now: float) -> int:
    return max(0, duration_sec - seconds_elapsed(started_at, now))


def guess_points(remaining_sec: int) -> int:
    """Points for a correct guess: a flat base plus a bonus for speed."""
    return BASE_POINTS + POINTS_PER_SECOND_LEFT * max(0, remaining_sec)


def painter_bonus() -> int:
    # Flat per correct guesser, not time-scaled.
    return PAINTER_BONUS
