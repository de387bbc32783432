"""Rich text builders for panel rows.

Kept apart from the App so row rendering can be checked without a terminal.
"""

from __future__ import annotations

from rich.text import Text

from core.models import CompetitionGroup, MatchView

from .constants import LIVE_RED

RED_CARD = "▮"


def time_cell(match: MatchView) -> Text:
    if match.is_halftime:
        return Text(match.display_stage, style=f"bold {LIVE_RED}")
    if match.is_live:
        style = f"bold blink {LIVE_RED}" if match.is_blinking else f"bold {LIVE_RED}"
        text = Text(match.display_time or match.display_stage, style=style)
        if match.display_time and match.display_stage:
            text.append(f"\n{match.display_stage}", style=LIVE_RED)
        return text
    if match.is_finished:
        return Text(match.display_stage or match.display_time, style="dim")
    text = Text(match.display_time)
    if match.display_stage:
        text.append(f"\n{match.display_stage}", style="dim")
    return text


def _team_line(name: str, red_cards: int) -> Text:
    line = Text(name)
    if red_cards > 0:
        line.append(" " + RED_CARD * red_cards, style="bold red")
    return line


def teams_cell(match: MatchView) -> Text:
    text = _team_line(match.home_team, match.home_red_cards)
    text.append("\n")
    text.append_text(_team_line(match.away_team, match.away_red_cards))
    return text


def score_cell(match: MatchView) -> Text:
    style = f"bold {LIVE_RED}" if match.is_live else "bold"
    return Text(f"{match.home_score or '-'}\n{match.away_score or '-'}", style=style)


def parts_cell(match: MatchView) -> Text:
    if not match.home_parts and not match.away_parts:
        return Text("")
    home = " ".join(match.home_parts)
    away = " ".join(match.away_parts)
    return Text(f"{home}\n{away}", style="grey70")


def sport_cell(sport: str) -> Text:
    return Text(sport.upper(), style="bold")


def competition_cell(group: CompetitionGroup) -> Text:
    style = "italic grey70" if group.synthetic else "bold grey85"
    return Text(group.label, style=style)
