"""
Process configuration using Pydantic Settings.

Settings are read from the environment exactly once (after loading `.env`)
and handed to services at construction time. Nothing else in the package
reads `os.environ` directly. Blank variables count as unset; malformed values
fail validation at startup.
"""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Annotated, Any, Dict, Literal, Optional, Tuple

import dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PersistenceBackend = Literal["auto", "sheets", "supabase", "none"]


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )

    # Summarizer
    openai_api_key: Optional[str] = Field(default=None, validation_alias="OPENAI_API_KEY")
    summary_model: str = Field(default="gpt-4o-mini", validation_alias="SUMMARY_MODEL")
    summary_temperature: float = Field(
        default=0.7, ge=0.0, le=2.0, validation_alias="SUMMARY_TEMPERATURE"
    )
    summary_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="SUMMARY_TIMEOUT_SECONDS",
        description="Bound on one summarizer call (seconds)",
    )

    # Persistence
    persistence_backend: PersistenceBackend = Field(default="auto", validation_alias="PERSISTENCE_BACKEND")
    persistence_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        validation_alias="PERSISTENCE_TIMEOUT_SECONDS",
        description="Bound on one store append (seconds)",
    )
    google_sheet_id: Optional[str] = Field(default=None, validation_alias="GOOGLE_SHEET_ID")
    google_worksheet_name: Optional[str] = Field(default=None, validation_alias="GOOGLE_WORKSHEET_NAME")
    google_service_account_email: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_SERVICE_ACCOUNT_EMAIL"
    )
    google_private_key: Optional[str] = Field(default=None, validation_alias="GOOGLE_PRIVATE_KEY")
    google_credentials_json: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_APPLICATION_CREDENTIALS_JSON"
    )
    supabase_url: Optional[str] = Field(default=None, validation_alias="SUPABASE_URL")
    supabase_service_key: Optional[str] = Field(default=None, validation_alias="SUPABASE_SERVICE_KEY")
    supabase_table: str = Field(default="survey_responses", validation_alias="SUPABASE_RESPONSES_TABLE")

    # HTTP / wizard
    auto_advance: bool = Field(default=True, validation_alias="AUTO_ADVANCE")
    cors_origins: Annotated[Tuple[str, ...], NoDecode] = Field(
        default=("*",),
        validation_alias="CORS_ORIGINS",
        description="Allowed CORS origins (comma-separated)",
    )
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    port: int = Field(default=8000, ge=1, le=65535, validation_alias="PORT")

    @field_validator("persistence_backend", mode="before")
    @classmethod
    def lower_backend(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_origins(cls, v):
        """Parse origins from comma-separated string"""
        if isinstance(v, str):
            v = [o.strip() for o in v.split(",") if o.strip()]
        return tuple(v) or ("*",)

    # ── Derived ───────────────────────────────────────────────────────────────

    def service_account_info(self) -> Optional[Dict[str, Any]]:
        """
        Google service-account info, or None when not configured.

        The full JSON wins over the email/key pair. Escaped newlines in the
        private key (common in .env files) are unescaped.
        """
        info: Dict[str, Any] = {}
        if self.google_credentials_json:
            try:
                info = dict(json.loads(self.google_credentials_json))
            except json.JSONDecodeError as e:
                raise RuntimeError("Invalid JSON in GOOGLE_APPLICATION_CREDENTIALS_JSON.") from e
        elif self.google_service_account_email and self.google_private_key:
            info = {
                "type": "service_account",
                "client_email": self.google_service_account_email,
                "private_key": self.google_private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        if not info:
            return None
        pk = info.get("private_key")
        if isinstance(pk, str) and "\\n" in pk:
            info["private_key"] = pk.replace("\\n", "\n")
        return info

    @property
    def sheets_configured(self) -> bool:
        has_creds = bool(self.google_credentials_json) or bool(
            self.google_service_account_email and self.google_private_key
        )
        return bool(self.google_sheet_id) and has_creds

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)

    @property
    def openai_configured(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    dotenv.load_dotenv()
    return Settings()
