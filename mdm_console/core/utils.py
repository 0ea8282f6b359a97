"""Shared utility functions for the console package."""
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

FRACTION = re.compile(r"\.(\d+)")


def get_config_value(key: str, default: str = "") -> str:
    """Get configuration value from Streamlit secrets or environment variables.

    Checks Streamlit secrets first (for cloud deployment), then falls back
    to environment variables (for local development).
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def load_env_file(path: Path) -> None:
    """Load environment variables from a file if it exists.

    Variables already present in the environment win over the file.
    """
    if not path.exists():
        return

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
    except OSError as exc:
        logger.debug("Could not load env file %s: %s", path, exc)


def clean_text(value: Optional[str]) -> str:
    """Collapse internal whitespace and trim; ``None`` becomes an empty string."""

    if not value:
        return ""
    return " ".join(str(value).split())


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Parse the ISO-8601 timestamps the store returns (``Z`` suffix included)."""

    if not raw:
        return None
    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits.
    text = FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Unparseable timestamp from store: %r", raw)
        return None
