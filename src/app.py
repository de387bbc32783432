"""Application entry point for the matchdeck overlay."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from dataclasses import asdict
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from art import tprint
from dotenv import load_dotenv

import settings
from adapters.command_queue import PendingCommandQueue
from adapters.http_channel import create_app
from adapters.http_fetcher import HttpDocumentFetcher
from client import build_http_client
from core.config import LayoutConfig, RefreshConfig
from core.models import OverlayView
from core.overlay import OverlayService
from core.refresh import RefreshScheduler
from core.store import MatchStore

NAME = "MATCHDECK"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging(force_console: bool = False) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The panel owns the terminal, so console logging is opt-in there.
    if force_console or config.get("console", False):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/matchdeck.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _refresh_config() -> RefreshConfig:
    return RefreshConfig(
        interval_seconds=settings.REFRESH_INTERVAL_SECONDS,
        fetch_timeout_seconds=settings.FETCH_TIMEOUT_SECONDS,
        max_concurrency=settings.MAX_CONCURRENCY,
    )


def _layout_config() -> LayoutConfig:
    known = set(LayoutConfig.__dataclass_fields__)
    overrides = {key: value for key, value in settings.LAYOUT.items() if key in known}
    return LayoutConfig(**overrides)


def _server_port() -> int:
    load_dotenv()
    override = os.getenv("MATCHDECK_PORT")
    return int(override) if override else settings.SERVER_PORT


def _build_server(service: OverlayService, commands: PendingCommandQueue) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(service, commands),
        host=settings.SERVER_HOST,
        port=_server_port(),
        log_config=None,
        access_log=False,
        lifespan="off",
    )
    return uvicorn.Server(config)


def _log_view(view: OverlayView) -> None:
    logging.getLogger(__name__).info(
        "View: %s matches in %s sports / %s competitions (height %s)",
        view.total_matches,
        len(view.sports),
        view.competition_count,
        view.height,
    )


async def _run_async(headless: bool) -> None:
    logger = logging.getLogger(__name__)

    store = MatchStore()
    commands = PendingCommandQueue()
    service = OverlayService(store=store, commands=commands, layout=_layout_config())
    server = _build_server(service, commands)
    refresh_config = _refresh_config()

    async with build_http_client(refresh_config.fetch_timeout_seconds, settings.USER_AGENT) as http_client:
        scheduler = None
        if settings.REFRESH_ENABLED:
            scheduler = RefreshScheduler(
                store=store,
                fetcher=HttpDocumentFetcher(http_client),
                config=refresh_config,
                on_updated=service.render,
            )
            service.on_added(scheduler.schedule_refresh)
        else:
            logger.info("Refresh loop disabled by config")

        if not headless:
            from frontend.app import OverlayPanelApp

            panel = OverlayPanelApp(
                service,
                scheduler=scheduler,
                server=server,
                close_when_empty=settings.CLOSE_WHEN_EMPTY,
            )
            await panel.run_async()
            return

        service.subscribe(_log_view)
        refresh_task = asyncio.create_task(scheduler.run()) if scheduler else None
        logger.info("Listening for producers on %s:%s", settings.SERVER_HOST, _server_port())
        try:
            await server.serve()
        finally:
            if scheduler is not None and refresh_task is not None:
                scheduler.stop()
                await refresh_task


def _run() -> None:
    _print_banner()
    _configure_logging()
    logging.getLogger(__name__).info("Starting matchdeck panel")
    asyncio.run(_run_async(headless=False))


def _serve() -> None:
    _print_banner()
    _configure_logging(force_console=True)
    logging.getLogger(__name__).info("Starting matchdeck (headless)")
    asyncio.run(_run_async(headless=True))


def _show_config() -> None:
    effective = {
        "config_path": settings.CONFIG_PATH,
        "server": {"host": settings.SERVER_HOST, "port": _server_port()},
        "refresh": {"enabled": settings.REFRESH_ENABLED, **asdict(_refresh_config())},
        "layout": asdict(_layout_config()),
        "panel": {"close_when_empty": settings.CLOSE_WHEN_EMPTY},
    }
    print(json.dumps(effective, indent=2))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="matchdeck")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Open the overlay panel (default)")
    subparsers.add_parser("serve", help="Track matches without the panel, logging each render")
    subparsers.add_parser("config", help="Print the effective configuration")

    args = parser.parse_args(argv)
    if args.command == "serve":
        _serve()
        return
    if args.command == "config":
        _show_config()
        return
    _run()


if __name__ == "__main__":
    main()
