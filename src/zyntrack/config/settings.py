"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    data_dir: Path = Field(
        default=Path(".zyntrack"),
        description="Directory holding the local mirror (logs, next id, sync config)",
    )

    api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API base URL (override for Enterprise)",
    )

    timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds for GitHub requests",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "ZYNTRACK_",
    }
