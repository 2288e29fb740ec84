from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Optional

from .teams import TEAMS


logger = logging.getLogger(__name__)


@dataclass
class LeaderboardEntry:
    nickname: str
    team_id: str
    team_name: str
    team_image: str
    total_score: int = 0
    games_played: int = 0

    def to_dict(self) -> dict:
        return {
            "nickname": self.nickname,
            "teamId": self.team_id,
            "teamName": self.team_name,
            "teamImage": self.team_image,
            "totalScore": self.total_score,
            "gamesPlayed": self.games_played,
        }


@dataclass
class TeamStat:
    team_id: str
    team_name: str
    team_image: str
    total_score: int = 0
    player_count: int = 0

    def to_dict(self) -> dict:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "teamImage": self.team_image,
            "totalScore": self.total_score,
            "playerCount": self.player_count,
        }


class Leaderboard:
    """Cumulative standings across every concluded game in the process.

    Players are keyed by nickname, so two people sharing a name share a row.
    Entries are never removed.
    """

    def __init__(self, top_n: int = 10) -> None:
        self.top_n = top_n
        self._lock = RLock()
        self._players: dict[str, LeaderboardEntry] = {}
        self._teams: dict[str, TeamStat] = {}

    def record_game(self, final_players: list[dict]) -> list[dict]:
        """Fold one game's final tallies in; returns this game's team scores."""
        with self._lock:
            game_team_scores: dict[str, int] = {}
            game_team_counts: dict[str, int] = {}

            for p in final_players:
                nickname = p["nickname"]
                score = int(p.get("score", 0))
                entry = self._players.get(nickname)
                if entry is None:
                    entry = LeaderboardEntry(
                        nickname=nickname,
                        team_id=p["teamId"],
                        team_name=p.get("teamName", ""),
                        team_image=p.get("teamImage", ""),
                    )
                    self._players[nickname] = entry
                else:
                    entry.team_id = p["teamId"]
                    entry.team_name = p.get("teamName", entry.team_name)
                    entry.team_image = p.get("teamImage", entry.team_image)
                entry.total_score += score
                entry.games_played += 1

                team_id = p["teamId"]
                game_team_scores[team_id] = game_team_scores.get(team_id, 0) + score
                game_team_counts[team_id] = game_team_counts.get(team_id, 0) + 1

            current: list[dict] = []
            for team_id, score in game_team_scores.items():
                name, image = _team_display(team_id)
                stat = self._teams.get(team_id)
                if stat is None:
                    stat = TeamStat(team_id=team_id, team_name=name, team_image=image)
                    self._teams[team_id] = stat
                stat.total_score += score
                stat.player_count += game_team_counts[team_id]
                current.append({"teamId": team_id, "teamName": name, "teamImage": image, "score": score})

            logger.info("Leaderboard updated with %d players, %d teams", len(final_players), len(current))
            return sorted(current, key=lambda t: t["score"], reverse=True)

    def top_players(self, limit: Optional[int] = None) -> list[dict]:
        n = self.top_n if limit is None else limit
        with self._lock:
            ranked = sorted(self._players.values(), key=lambda e: e.total_score, reverse=True)
            return [e.to_dict() for e in ranked[: max(0, n)]]

    def team_rankings(self) -> list[dict]:
        with self._lock:
            ranked = sorted(self._teams.values(), key=lambda t: t.total_score, reverse=True)
            return [t.to_dict() for t in ranked]

    def entry(self, nickname: str) -> Optional[LeaderboardEntry]:
        with self._lock:
            return self._players.get(nickname)


def _team_display(team_id: str) -> tuple[str, str]:
    team = TEAMS.get(team_id)
    if team is None:
        return team_id, ""
    return team.name, team.image
