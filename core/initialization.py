"""
core/initialization.py
----------------------
Loads configuration from .env and wires all runtime components with simple
dependency-injection (DI) overrides.
"""

from __future__ import annotations

import os
import logging
from typing import Dict, Optional

from dotenv import load_dotenv

from modules.account_service import (
    DEFAULT_CLOSED_PNL_LIMIT,
    DEFAULT_POSITIONS_LIMIT,
    AccountDataService,
)
from modules.bybit_client import BYBIT_BASE_URL, DEFAULT_TIMEOUT, BybitClient
from modules.scheduler import StatusScheduler
from notifiers.telegram import TELEGRAM_BASE_URL, TelegramNotifier
from utils.config_validator import validate_config
from utils.logger import setup_logger

DEFAULT_CHECK_INTERVAL = 3600


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _check_interval() -> Optional[int]:
    """CHECK_INTERVAL is required; an unparseable value falls back to one hour."""
    raw = os.getenv("CHECK_INTERVAL")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        logging.getLogger(__name__).warning(
            "CHECK_INTERVAL=%r is not an integer – using %ss", raw, DEFAULT_CHECK_INTERVAL
        )
        return DEFAULT_CHECK_INTERVAL


def load_configuration(env_path: str = "config.env") -> Dict:
    """
    Load settings from an .env-style file and return a structured config dict.
    Variables already present in the environment win over the file.
    """
    log = logging.getLogger(__name__)
    load_dotenv(dotenv_path=env_path)

    timeout_raw = os.getenv("HTTP_TIMEOUT", "").strip()
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise ValueError(f"HTTP_TIMEOUT must be a number, got {timeout_raw!r}") from exc

    conf: Dict[str, object] = {
        "BYBIT": {
            "api_key": os.getenv("BYBIT_API_KEY"),
            "api_secret": os.getenv("BYBIT_API_SECRET"),
            "account_type": os.getenv("ACCOUNT_TYPE"),
            "base_url": os.getenv("BYBIT_BASE_URL", BYBIT_BASE_URL),
        },
        "TELEGRAM": {
            "token": os.getenv("TELEGRAM_BOT_TOKEN"),
            "chat_id": os.getenv("TELEGRAM_GROUP_ID"),
            "base_url": os.getenv("TELEGRAM_BASE_URL", TELEGRAM_BASE_URL),
        },
        "CHECK_INTERVAL": _check_interval(),
        "POSITIONS_LIMIT": _int_env("POSITIONS_LIMIT", DEFAULT_POSITIONS_LIMIT),
        "CLOSED_PNL_LIMIT": _int_env("CLOSED_PNL_LIMIT", DEFAULT_CLOSED_PNL_LIMIT),
        "HTTP_TIMEOUT": timeout,
    }

    # secrets stay out of the log
    log.debug("Account type: %s", conf["BYBIT"]["account_type"])
    log.debug("Check interval: %ss", conf["CHECK_INTERVAL"])

    return conf


def initialize_components(
    config: Dict,
    overrides: Optional[Dict[str, object]] = None,
    logger: Optional[logging.Logger] = None,
    ) -> Dict[str, object]:
    """
    Validate the config, then construct and wire all runtime components
    (supports DI via overrides).

    Keys you can override:
    {"logger", "bybit_client", "account_service", "notifier", "scheduler"}
    """
    overrides = overrides or {}
    validate_config(config)

    # 1) Logger
    logger = overrides.get("logger") or logger or setup_logger(__name__)

    bybit_cfg = config["BYBIT"]
    tg_cfg = config["TELEGRAM"]
    timeout = config.get("HTTP_TIMEOUT", DEFAULT_TIMEOUT)

    # 2) Signed Bybit client
    bybit_client = overrides.get("bybit_client")
    if bybit_client is None:
        bybit_client = BybitClient(
            api_key=bybit_cfg["api_key"],
            api_secret=bybit_cfg["api_secret"],
            base_url=bybit_cfg.get("base_url") or BYBIT_BASE_URL,
            timeout=timeout,
            logger=logger,
        )

    # 3) Account data service
    account_service = overrides.get("account_service")
    if account_service is None:
        account_service = AccountDataService(
            bybit_client, bybit_cfg["account_type"], logger=logger
        )

    # 4) Telegram notifier
    notifier = overrides.get("notifier")
    if notifier is None:
        notifier = TelegramNotifier(
            token=tg_cfg["token"],
            chat_id=tg_cfg["chat_id"],
            base_url=tg_cfg.get("base_url") or TELEGRAM_BASE_URL,
            timeout=timeout,
        )

    # 5) Scheduler
    scheduler = overrides.get("scheduler")
    if scheduler is None:
        scheduler = StatusScheduler(
            account_service,
            notifier,
            account_label=bybit_cfg["account_type"],
            interval=config["CHECK_INTERVAL"],
            positions_limit=config.get("POSITIONS_LIMIT") or DEFAULT_POSITIONS_LIMIT,
            closed_pnl_limit=config.get("CLOSED_PNL_LIMIT") or DEFAULT_CLOSED_PNL_LIMIT,
            logger=logger,
        )

    logger.info("✅ Logger initialized.")
    logger.info("✅ BybitClient initialized (%s).", bybit_cfg["account_type"])
    logger.info("✅ Notifier initialized: %s", notifier.__class__.__name__)
    logger.info("✅ StatusScheduler initialized (every %ss).", config["CHECK_INTERVAL"])

    return {
        "logger": logger,
        "bybit_client": bybit_client,
        "account_service": account_service,
        "notifier": notifier,
        "scheduler": scheduler,
    }
