"""Runtime configuration for the backend client.

Values come from environment variables, optionally seeded from a `.env`
file in the working directory. Settings are resolved once at startup and
passed to `PortfolioBackendClient`; nothing else reads the environment.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel


LOCAL_HOSTS = {"localhost", "127.0.0.1"}
LOCAL_BASE_URL = "http://localhost:8080/api/portfolios"
API_PATH = "/api/portfolios"

DEFAULT_HOST = "localhost"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"


class BackendSettings(BaseModel):
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def resolve_base_url(host: str) -> str:
    """Pick the backend address for the host the dashboard is served from.

    Local development talks to the backend on port 8080; deployed hosts
    serve the API under the same origin.
    """
    host = host.strip()
    if host in LOCAL_HOSTS:
        return LOCAL_BASE_URL
    return f"https://{host}{API_PATH}"


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path | str] = None,
) -> BackendSettings:
    """Build `BackendSettings` from `env` (defaults to `os.environ`).

    When reading the process environment a `.env` file is loaded first;
    variables already set in the environment take precedence over it.
    """

    if env is None:
        load_dotenv(dotenv_path if dotenv_path is not None else Path.cwd() / ".env")
        env = os.environ

    explicit_url = (env.get("ESG_RISK_API_URL") or "").strip()
    if explicit_url:
        base_url = explicit_url
    else:
        base_url = resolve_base_url(env.get("ESG_RISK_HOST") or DEFAULT_HOST)

    raw_timeout = env.get("ESG_RISK_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ValueError(f"ESG_RISK_TIMEOUT must be a number of seconds, got {raw_timeout!r}")

    log_level = (env.get("ESG_RISK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"ESG_RISK_LOG_LEVEL must be a logging level name, got {log_level!r}")

    return BackendSettings(
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        log_level=log_level,
    )
