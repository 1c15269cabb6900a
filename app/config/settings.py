from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="WORKLOAD_LOG_LEVEL")
    log_file: str | None = Field(
        default=None,
        validation_alias="WORKLOAD_LOG_FILE",
        description="Optional rotating log file; console only when unset",
    )
    log_serialize: bool = Field(
        default=False,
        validation_alias="WORKLOAD_LOG_SERIALIZE",
        description="Write the log file as JSON lines",
    )
    acute_window_days: int = Field(
        default=7,
        ge=0,
        validation_alias="WORKLOAD_ACUTE_WINDOW_DAYS",
        description="Acute window length; also the weekly scale of chronic load",
    )
    chronic_window_days: int = Field(
        default=28,
        ge=0,
        validation_alias="WORKLOAD_CHRONIC_WINDOW_DAYS",
        description="Maximum chronic window length",
    )
    past_days: int = Field(
        default=28,
        ge=0,
        validation_alias="WORKLOAD_PAST_DAYS",
        description="Days of history shown before today in a projected timeline",
    )
    future_days: int = Field(
        default=7,
        ge=0,
        validation_alias="WORKLOAD_FUTURE_DAYS",
        description="Days after today shown in a projected timeline",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WORKLOAD_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid WORKLOAD_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
