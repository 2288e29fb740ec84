from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    image: str
    color: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "image": self.image, "color": self.color}


DEFAULT_TEAM_ID = "pearl-tea-latte"

TEAMS: dict[str, Team] = {
    t.id: t
    for t in (
        Team("pearl-tea-latte", "珍珠紅茶拿鐵隊", "/teams/珍珠紅茶拿鐵.png", "#D4A574"),
        Team("roasted-barley", "焙香決明大麥隊", "/teams/焙香決明大麥.png", "#8B7355"),
        Team("plum-green", "熟釀青梅綠隊", "/teams/熟釀青梅綠.png", "#A8D5BA"),
        Team("light-buckwheat", "輕纖蕎麥茶隊", "/teams/輕纖蕎麥茶.png", "#E6D3A3"),
        Team("lime-tea", "青檸香茶隊", "/teams/青檸香茶.png", "#B8E6B8"),
        Team("pomelo-green", "香柚綠茶隊", "/teams/香柚綠茶.png", "#F0E68C"),
    )
}


def get_team(team_id: str | None) -> Team:
    return TEAMS.get(team_id or "", TEAMS[DEFAULT_TEAM_ID])
