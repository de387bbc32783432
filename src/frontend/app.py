"""Main Textual app for the matchdeck overlay panel."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import DataTable, Footer, Static

from core.layout import compute_display_height
from core.models import OverlayView
from core.overlay import OverlayService
from core.refresh import RefreshScheduler

from .constants import (
    ACTIVE_BLUE,
    BRAND_RED,
    COMPETITION_ROW_PREFIX,
    PANEL_LAYOUT,
    SPORT_ROW_PREFIX,
)
from .formatting import (
    competition_cell,
    parts_cell,
    score_cell,
    sport_cell,
    teams_cell,
    time_cell,
)
from .state import PanelState


class OverlayPanelApp(App):
    """Floating summary of pinned matches, grouped by sport and competition."""

    BINDINGS = [
        ("o", "open_match", "Open"),
        ("delete", "remove_match", "Remove"),
        ("x", "remove_match", "Remove"),
        ("r", "refresh_now", "Refresh"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS = """
    Screen {
        background: #000000;
        color: #ffffff;
    }

    #header {
        height: 3;
        padding: 0 2;
        border-bottom: solid #333333;
    }

    #header-left, #header-right {
        width: 1fr;
    }

    #header-right {
        text-align: right;
    }

    #panel {
        height: auto;
        border: solid #333333;
    }

    #matches {
        height: 1fr;
    }

    #empty {
        height: 1fr;
        content-align: center middle;
        color: #888888;
    }

    .subtle {
        color: #c6d2dd;
    }
    """

    def __init__(
        self,
        service: OverlayService,
        scheduler: Optional[RefreshScheduler] = None,
        server: Any = None,
        close_when_empty: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._service = service
        self._scheduler = scheduler
        self._server = server
        self._close_when_empty = close_when_empty
        self.panel_state = PanelState()
        self._table_ready = False

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal():
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                with Vertical(id="header-right"):
                    yield Static("", id="header-status", classes="subtle")
        with Container(id="panel"):
            yield DataTable(id="matches", cursor_type="row", show_header=False)
            yield Static("Sin partidos anclados", id="empty")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#matches", DataTable)
        table.add_column("time", key="time", width=10)
        table.add_column("teams", key="teams", width=30)
        table.add_column("score", key="score", width=5)
        table.add_column("parts", key="parts", width=14)
        self._table_ready = True

        self._service.subscribe(self._on_view)
        if self._server is not None:
            self.run_worker(self._server.serve(), name="http-channel", exclusive=False)
        if self._scheduler is not None:
            self.run_worker(self._scheduler.run(), name="refresh", exclusive=False)
        self._service.render()

    def _on_view(self, view: OverlayView) -> None:
        self._render_view(view)

    def _render_view(self, view: OverlayView) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#matches", DataTable)
        empty = self.query_one("#empty", Static)
        table.clear()
        for sport in view.sports:
            table.add_row(sport_cell(sport.sport), "", "", "", key=f"{SPORT_ROW_PREFIX}{sport.sport}")
            for group in sport.competitions:
                table.add_row(
                    competition_cell(group),
                    "",
                    "",
                    "",
                    key=f"{COMPETITION_ROW_PREFIX}{group.competition.id}",
                )
                for match in group.matches:
                    table.add_row(
                        time_cell(match),
                        teams_cell(match),
                        score_cell(match),
                        parts_cell(match),
                        key=match.id,
                        height=2,
                    )

        table.display = not view.is_empty
        empty.display = view.is_empty
        panel = self.query_one("#panel", Container)
        panel.styles.height = compute_display_height(
            len(view.sports),
            view.competition_count,
            view.total_matches,
            PANEL_LAYOUT,
            screen_height=self.size.height or None,
        )

        self.panel_state.last_render = datetime.now()
        if view.total_matches:
            self.panel_state.had_matches = True
        self._refresh_header(view)

        if self._close_when_empty and view.is_empty and self.panel_state.had_matches:
            self.action_request_quit()

    def _refresh_header(self, view: OverlayView) -> None:
        status = self.query_one("#header-status", Static)
        stamp = self.panel_state.last_render.strftime("%H:%M:%S") if self.panel_state.last_render else "-"
        line = f"{view.total_matches} partidos · {stamp}"
        if self.panel_state.message:
            line = f"{line} · {self.panel_state.message}"
        status.update(line)

    def _selected_match_id(self) -> Optional[str]:
        table = self.query_one("#matches", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key.value
        if not row_key or row_key.startswith((SPORT_ROW_PREFIX, COMPETITION_ROW_PREFIX)):
            return None
        return row_key

    def _set_message(self, message: str) -> None:
        self.panel_state.message = message
        self._refresh_header(self._service.view)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_open_match()

    def action_open_match(self) -> None:
        match_id = self._selected_match_id()
        if match_id is None:
            return
        if self._service.open_match(match_id):
            self._set_message("abriendo partido")
        else:
            self._set_message("sin pestaña de origen")

    def action_remove_match(self) -> None:
        match_id = self._selected_match_id()
        if match_id is None:
            return
        self._service.remove_match(match_id)

    def action_refresh_now(self) -> None:
        if self._scheduler is None:
            return
        self._set_message("actualizando")
        self.run_worker(self._refresh_once(), name="refresh-now", exclusive=False)

    async def _refresh_once(self) -> None:
        if self._scheduler is None:
            return
        updated = await self._scheduler.run_cycle()
        self._set_message(f"{updated} actualizados")

    def action_request_quit(self) -> None:
        if self._scheduler is not None:
            self._scheduler.stop()
        if self._server is not None:
            self._server.should_exit = True
        self.exit()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("MATCH", BRAND_RED),
            ("DECK", ACTIVE_BLUE),
            (" > Partidos anclados", "bold"),
        )
