from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class InvalidStroke(ValueError):
    pass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Stroke:
    start: Point
    end: Point
    color: str
    width: float
    timestamp: float

    def to_payload(self) -> dict:
        """Wire form relayed to other members, without the server timestamp."""
        return {
            "from": self.start.to_dict(),
            "to": self.end.to_dict(),
            "color": self.color,
            "width": self.width,
        }

    def to_dict(self) -> dict:
        d = self.to_payload()
        d["timestamp"] = self.timestamp
        return d


def _number(value: Any, field: str) -> float:
    # bool is an int subclass; a stray true/false is not a coordinate.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidStroke(f"{field} must be a number")
    return value


def _point(raw: Any, field: str) -> Point:
    if not isinstance(raw, dict):
        raise InvalidStroke(f"{field} must be an object")
    return Point(_number(raw.get("x"), f"{field}.x"), _number(raw.get("y"), f"{field}.y"))


def parse_stroke(payload: Any, timestamp: float) -> Stroke:
    if not isinstance(payload, dict):
        raise InvalidStroke("stroke must be an object")

    color = payload.get("color")
    if not isinstance(color, str) or not color.strip():
        raise InvalidStroke("color must be a non-empty string")

    width = _number(payload.get("width"), "width")
    if width <= 0:
        raise InvalidStroke("width must be positive")

    return Stroke(
        start=_point(payload.get("from"), "from"),
        end=_point(payload.get("to"), "to"),
        color=color,
        width=width,
        timestamp=timestamp,
    )


class StrokeLog:
    """Append-only, ordered segments of the current round."""

    def __init__(self) -> None:
        self._strokes: list[Stroke] = []

    def append(self, stroke: Stroke) -> None:
        self._strokes.append(stroke)

    def clear(self) -> None:
        self._strokes = []

    def to_list(self) -> list[dict]:
        return [s.to_dict() for s in self._strokes]

    def __len__(self) -> int:
        return len(self._strokes)
