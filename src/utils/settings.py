"""Runtime configuration and logging setup."""

import logging
import os
from typing import Optional

import streamlit as st
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseModel):
    """Connection settings for the backend and the AI provider."""

    supabase_url: str = Field("", description="Supabase project URL")
    supabase_key: str = Field("", description="Supabase anon or service-role key")
    ai_api_key: str = Field("", description="API key for the OpenAI-compatible provider")
    ai_base_url: Optional[str] = Field(None, description="Override for non-OpenAI endpoints")
    ai_model: str = Field("gpt-4o-mini", description="Chat model used by the assistant")
    log_level: str = Field("INFO", description="Root log level")

    @property
    def has_backend(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def has_ai(self) -> bool:
        return bool(self.ai_api_key)


def get_secret(key: str, default: str = "") -> str:
    """Get a secret from st.secrets (Streamlit Cloud) or os.environ (.env file)."""
    # First try st.secrets (for Streamlit Cloud deployment)
    try:
        if hasattr(st, 'secrets') and key in st.secrets:
            return st.secrets[key]
    except Exception:
        pass

    # Fall back to environment variables (for local development)
    return os.getenv(key, default)


def load_settings() -> Settings:
    """Build Settings from secrets and environment variables."""
    return Settings(
        supabase_url=get_secret("SUPABASE_URL"),
        supabase_key=get_secret("SUPABASE_KEY"),
        ai_api_key=get_secret("AI_API_KEY"),
        ai_base_url=get_secret("AI_BASE_URL") or None,
        ai_model=get_secret("AI_MODEL", "gpt-4o-mini"),
        log_level=get_secret("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; repeated calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
