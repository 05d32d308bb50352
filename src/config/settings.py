# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: provider
credentials and models, upload limits, server binding and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatrelay.logging.handlers import parse_size


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Server ===
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: Path = Path("public")

    # === Upstream providers ===
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    cerebras_api_key: str = ""
    cerebras_base_url: str = "https://api.cerebras.ai/v1"

    # Per-adapter model assignment
    llm_kimi_model: str = "moonshotai/kimi-k2-instruct-0905"
    llm_reasoning_model: str = "openai/gpt-oss-120b"
    llm_reasoning_effort: Literal["low", "medium", "high"] = "medium"
    llm_cerebras_model: str = "gpt-oss-120b"
    llm_vision_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    vision_enabled: bool = True

    # === Uploads ===
    max_upload_size_mb: int = 20
    max_upload_files: int = 10
    upload_allowed_extensions: str = (
        "jpg,jpeg,png,gif,webp,pdf,docx,xlsx,pptx,txt,json,csv,zip,rar,md"
    )
    attachment_text_limit: int = 10_000

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.max_upload_size_mb <= 0:
            errors.append("MAX_UPLOAD_SIZE_MB must be > 0")
        if self.max_upload_files <= 0:
            errors.append("MAX_UPLOAD_FILES must be > 0")
        if self.attachment_text_limit <= 0:
            errors.append("ATTACHMENT_TEXT_LIMIT must be > 0")
        if not self.upload_allowed_extensions_list:
            errors.append("UPLOAD_ALLOWED_EXTENSIONS must list at least one extension")
        try:
            parse_size(self.log_rotation)
        except ValueError:
            errors.append(f"LOG_ROTATION {self.log_rotation!r} is not a size like '10MB'")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def upload_allowed_extensions_list(self) -> list[str]:
        """Parse the comma-separated allow-list into lower-case extensions."""
        return [
            e.strip().lower().lstrip(".")
            for e in self.upload_allowed_extensions.split(",")
            if e.strip()
        ]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


def load_settings(env_file: str | Path | None = ".env") -> Settings:
    """Load settings from environment and an optional .env file.

    Args:
        env_file: Path to the .env file, or None to read the environment only.

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If cross-field validation fails.
    """
    return Settings(_env_file=env_file)  # type: ignore[call-arg]
