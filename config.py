"""Configuration settings for Roadmap Forge."""

import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env into os.environ so ROADMAP_FORGE_* overrides are visible
load_dotenv()


class Settings(BaseSettings):
    """Global settings for Roadmap Forge.

    Settings can be overridden via environment variables with ROADMAP_FORGE_ prefix.
    Example: ROADMAP_FORGE_MIN_CONCEPTS_PER_TOPIC=4
    """

    # Persistence
    roadmap_file: str = Field(
        default="./workspace/roadmap.json",
        description="JSON file the roadmap is saved to when persistence is on"
    )
    persist_roadmap: bool = Field(
        default=False,
        description="Save the roadmap after every mutation"
    )

    # Quality thresholds
    min_concepts_per_topic: int = Field(
        default=3,
        ge=1,
        description="Topics with fewer key concepts are reported as needing more"
    )
    max_concepts_per_topic: int = Field(
        default=5,
        ge=1,
        description="Upper end of the recommended key concept range"
    )

    # Resource checks
    allowed_url_schemes: List[str] = Field(
        default_factory=lambda: ["http", "https"],
        description="Schemes accepted by the roadmap-wide URL check"
    )
    placeholder_marker: str = Field(
        default="placeholder",
        description="Case-insensitive marker that flags a resource as placeholder content"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level used by configure_logging()"
    )

    model_config = {
        "env_prefix": "ROADMAP_FORGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_roadmap_path(self) -> Path:
        """Get roadmap file path as Path object."""
        return Path(self.roadmap_file)

    def concept_range_label(self) -> str:
        """Recommended concept range, e.g. '3-5'."""
        return f"{self.min_concepts_per_topic}-{self.max_concepts_per_topic}"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a rich log handler on the root logger."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# Create singleton instance
settings = Settings()
