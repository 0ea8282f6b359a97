"""Runtime configuration resolved from Streamlit secrets, env files and env vars."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from mdm_console.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/mdm.env")
FILTER_STRATEGIES = ("client", "server")
_ENV_LOADED = False


def _ensure_env() -> None:
    """Populate env vars from the local secrets file once per process."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    load_env_file(Path(os.getenv("MDM_ENV_FILE", DEFAULT_ENV_FILE)))


def _float_value(key: str, default: float) -> float:
    raw = get_config_value(key, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", key, raw, default)
        return default


def _mask(secret: str) -> str:
    if not secret:
        return ""
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}…{secret[-4:]}"


@dataclass(frozen=True)
class Settings:
    """Boundary configuration for both backends and the UI."""

    store_url: str = ""
    store_key: str = ""
    assistant_base_url: str = "http://localhost:5000"
    request_timeout: float = 30.0
    filter_strategy: str = "client"
    follow_up_delay: float = 0.5
    log_level: str = "INFO"
    sheets_spreadsheet_id: str = ""
    sheets_worksheet: str = "Customers"
    service_account_file: str = ""

    @property
    def store_configured(self) -> bool:
        return bool(self.store_url and self.store_key)

    def masked(self) -> Dict[str, str]:
        """Return a display-friendly view with credentials hidden."""

        return {
            "Store URL": self.store_url or "(not set)",
            "Store key": _mask(self.store_key) or "(not set)",
            "Assistant URL": self.assistant_base_url,
            "Request timeout (s)": f"{self.request_timeout:g}",
            "Customer filter": self.filter_strategy,
            "Chat follow-up delay (s)": f"{self.follow_up_delay:g}",
            "Log level": self.log_level,
            "Sheets spreadsheet": self.sheets_spreadsheet_id or "(not set)",
            "Sheets worksheet": self.sheets_worksheet,
        }


def load_settings() -> Settings:
    """Resolve settings from secrets, ``secrets/mdm.env`` and the environment."""

    _ensure_env()
    strategy = get_config_value("CUSTOMER_FILTER_STRATEGY", "client").strip().lower()
    if strategy not in FILTER_STRATEGIES:
        logger.warning("Unknown CUSTOMER_FILTER_STRATEGY %r, falling back to client", strategy)
        strategy = "client"

    return Settings(
        store_url=get_config_value("SUPABASE_URL", "").strip().rstrip("/"),
        store_key=get_config_value("SUPABASE_ANON_KEY", "").strip(),
        assistant_base_url=get_config_value("ASSISTANT_BASE_URL", "http://localhost:5000").strip().rstrip("/"),
        request_timeout=_float_value("REQUEST_TIMEOUT_SECONDS", 30.0),
        filter_strategy=strategy,
        follow_up_delay=_float_value("CHAT_FOLLOW_UP_DELAY_SECONDS", 0.5),
        log_level=get_config_value("LOG_LEVEL", "INFO").upper(),
        sheets_spreadsheet_id=get_config_value("GOOGLE_SHEETS_SPREADSHEET_ID", "").strip(),
        sheets_worksheet=get_config_value("GOOGLE_SHEETS_WORKSHEET", "Customers").strip() or "Customers",
        service_account_file=get_config_value("GOOGLE_SERVICE_ACCOUNT_FILE", "").strip(),
    )
