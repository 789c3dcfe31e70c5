"""Application configuration. All env vars defined here with defaults."""

import logging

from pydantic_settings import BaseSettings


class AutoflowConfig(BaseSettings):
    # ── App ──
    app_name: str = "autoflow"
    debug: bool = False
    log_level: str = "INFO"

    # ── Database ──
    database_url: str = "sqlite+aiosqlite:///./autoflow.db"

    # ── Workflows ──
    max_workflow_actions: int = 100

    # ── Built-in actions ──
    http_timeout_seconds: float = 30.0

    model_config = {"env_prefix": "AUTOFLOW_", "env_file": ".env", "extra": "ignore"}


def configure_logging(level: str = None) -> None:
    """Install a root handler using the configured (or given) level."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


config = AutoflowConfig()
