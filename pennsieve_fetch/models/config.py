"""
Pydantic model for the run configuration.
Values arrive from CLI options, which fall back to the workflow environment.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pennsieve_fetch.exceptions import ConfigurationError

# Config field -> environment variable set by the workflow runner
ENV_VARS = {
    "integration_id": "INTEGRATION_ID",
    "input_dir": "INPUT_DIR",
    "session_token": "SESSION_TOKEN",
    "api_host": "PENNSIEVE_API_HOST",
    "api_host2": "PENNSIEVE_API_HOST2",
    "downloader": "DOWNLOADER",
    "log_level": "LOG_LEVEL",
}

DEFAULT_DOWNLOADER = "wget"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class RunConfig(BaseModel):
    """A validated configuration model for a single run."""

    integration_id: str = ""
    input_dir: Path | None = None
    session_token: str = Field(default="", repr=False)

    # Manifest endpoint host
    api_host: str = ""
    # Integrations endpoint host
    api_host2: str = ""

    downloader: str = DEFAULT_DOWNLOADER
    log_level: str = "INFO"
    request_timeout: float | None = None

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    @field_validator("input_dir", mode="before")
    @classmethod
    def empty_dir_means_cwd(cls, v: Any) -> Any:
        """An empty INPUT_DIR leaves the downloader in the current directory."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("downloader")
    @classmethod
    def validate_downloader(cls, v: str) -> str:
        if not v:
            raise ValueError("Downloader executable cannot be empty.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(LOG_LEVELS)}.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("Request timeout must be positive.")
        return v


def load_config(options: dict[str, Any]) -> RunConfig:
    """
    Builds a validated RunConfig from option values.

    Options set to None are dropped so the model defaults apply.

    Raises:
        ConfigurationError: If validation fails.
    """
    values = {key: value for key, value in options.items() if value is not None}
    try:
        return RunConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
