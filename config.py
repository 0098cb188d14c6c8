"""Configuration for the exposition report viewer"""
from pathlib import Path
from typing import Any, Dict, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Settings read from PROMVIEW_* environment variables"""

    # Output
    color: Literal["auto", "always", "never"] = Field(default="auto", description="When to emit terminal colors")
    sort_samples: bool = Field(default=False, description="Sort gauge/counter rows by value, highest first")
    tab_size: int = Field(default=8, ge=1, le=16, description="Tab stop width for report rows")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="WARNING", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")
    log_json: bool = Field(default=False, description="Render log events as JSON")

    model_config = SettingsConfigDict(env_prefix="PROMVIEW_", case_sensitive=False)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('log_file')
    @classmethod
    def ensure_parent_directories(cls, v):
        """Ensure the log file directory exists"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    def get_console_options(self) -> Dict[str, Any]:
        """Keyword arguments for rich.console.Console"""
        options: Dict[str, Any] = {
            "highlight": False,
            "soft_wrap": True,
            "emoji": False,
            "tab_size": self.tab_size,
        }
        if self.color == "always":
            options["force_terminal"] = True
        elif self.color == "never":
            options["no_color"] = True
            options["color_system"] = None
        return options
