# =============================================================================
# fabstock_core/config.py
# Process-level configuration (environment / Streamlit secrets)
# =============================================================================
"""
Process configuration for FabStock Manager.

Application settings (storage mode, Supabase endpoint, EmailJS keys) live in
``AppSettings`` and are persisted in local storage. This module only covers
values that come from the process environment:

    FABSTOCK_DB_PATH               SQLite file backing local storage
    OPENAI_API_KEY                 key for the AI assistant
    FABSTOCK_AI_MODEL              chat model (default gpt-4o-mini)
    FABSTOCK_REMOTE_POLL_INTERVAL  seconds between change-feed polls
    FABSTOCK_SUPER_ADMIN_EMAIL     reserved super-admin login
    FABSTOCK_APP_URL               link sent in invitations and login emails
    FABSTOCK_LOG_LEVEL             root log level (default INFO)
    FABSTOCK_LOG_DIR               daily log file directory, "-" for console only

A ``.env`` file at the working directory is honoured.
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_DB_PATH = PROJECT_ROOT / "local_data" / "fabstock.db"
DEFAULT_AI_MODEL = "gpt-4o-mini"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_SUPER_ADMIN_EMAIL = "admin@fablab.com"
DEFAULT_APP_URL = "http://localhost:8501"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"


def get_db_path() -> Path:
    """Location of the local durable key-value store."""
    value = os.getenv("FABSTOCK_DB_PATH")
    return Path(value) if value else DEFAULT_DB_PATH


def get_openai_api_key() -> Optional[str]:
    """
    OpenAI key from the environment, falling back to Streamlit secrets:

        [openai]
        api_key = "sk-..."
    """
    key = os.getenv("OPENAI_API_KEY")
    if key:
        return key

    try:
        import streamlit as st
        if "openai" in st.secrets:
            return st.secrets["openai"].get("api_key")
    except Exception:
        # No secrets file configured
        return None
    return None


def get_ai_model() -> str:
    return os.getenv("FABSTOCK_AI_MODEL", DEFAULT_AI_MODEL)


def get_poll_interval() -> float:
    try:
        return float(os.getenv("FABSTOCK_REMOTE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL))
    except ValueError:
        return DEFAULT_POLL_INTERVAL


def get_super_admin_email() -> str:
    return os.getenv("FABSTOCK_SUPER_ADMIN_EMAIL", DEFAULT_SUPER_ADMIN_EMAIL).strip().lower()


def get_app_url() -> str:
    """Public URL of the app, used in invitation and magic-link emails."""
    return os.getenv("FABSTOCK_APP_URL", DEFAULT_APP_URL)


def get_log_level() -> int:
    """``FABSTOCK_LOG_LEVEL`` as a logging level; unknown names mean INFO."""
    name = os.getenv("FABSTOCK_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_log_dir() -> Optional[Path]:
    """Directory for daily log files, None when ``FABSTOCK_LOG_DIR`` is ``-``."""
    value = os.getenv("FABSTOCK_LOG_DIR")
    if value == "-":
        return None
    return Path(value) if value else DEFAULT_LOG_DIR
