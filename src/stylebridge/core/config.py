"""Configuration Management."""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Compiler settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="STYLEBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Breakpoints
    default_breakpoint: str = Field(
        default="breakpoint_base", description="Breakpoint used for unrecognized breakpoint names"
    )
    fallback_unknown_breakpoints: bool = Field(
        default=True, description="Map unknown breakpoint names to the default breakpoint"
    )

    # Compilation policy
    gap_maps_both_axes: bool = Field(
        default=True, description="Apply flex 'gap' to both horizontal and vertical spacing"
    )
    strict_unknown_properties: bool = Field(
        default=False, description="Fail element compilation on unknown property names"
    )
    default_length_unit: str = Field(default="px", description="Unit assumed for bare lengths")

    # Identifiers
    id_prefix: str = Field(default="el", min_length=1, description="Element ID prefix")

    # Input limits
    max_request_size: int = Field(default=512 * 1024, gt=0, description="Max JSON request size")
    max_json_depth: int = Field(default=40, gt=0, description="Max JSON nesting depth")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
