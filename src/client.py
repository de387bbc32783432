"""HTTP client factory for matchdeck.

One AsyncClient is shared by every refresh fetch so connections are pooled.
Its lifecycle is owned by the caller (``async with build_http_client(...)``).
"""

from __future__ import annotations

import logging
import os

import httpx
from dotenv import load_dotenv

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def build_http_client(timeout_seconds: float, user_agent: str = "") -> httpx.AsyncClient:
    """Create the AsyncClient used for match document fetches.

    MATCHDECK_USER_AGENT from the environment (or .env) wins over the
    configured user agent.
    """

    load_dotenv()

    agent = os.getenv("MATCHDECK_USER_AGENT") or user_agent or DEFAULT_USER_AGENT

    logging.getLogger(__name__).info("Initializing HTTP client")

    return httpx.AsyncClient(
        timeout=timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": agent, "Accept-Language": "es-ES,es;q=0.9"},
    )
