"""
config.py — Environment configuration for slideops.

Settings are read from environment variables (optionally seeded from a
``.env`` file at the project root). Fixed OOXML part locations live here
as module constants.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

# Fixed part locations inside the presentation package
SLIDE_PART = "ppt/slides/slide1.xml"
THEME_PART = "ppt/theme/theme1.xml"
MEDIA_PREFIX = "ppt/media/"


# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # Output location for modified packages
        self.output_dir: str = os.environ.get("OUTPUT_DIR", "./output")

        # Deflate level used when re-serializing packages (0-9)
        self.zip_compression_level: int = int(os.environ.get("ZIP_COMPRESSION_LEVEL", "9"))

        # Typeface used by shape_create when the operation names none
        self.default_font_family: str = os.environ.get("DEFAULT_FONT_FAMILY", "Calibri")

        # Logging
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    @property
    def output_path(self) -> Path:
        """Output directory as a Path."""
        return Path(self.output_dir)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure the ``slideops`` logger hierarchy.

    Args:
        level: Log level name. Defaults to the LOG_LEVEL setting.
    """
    level_name = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("slideops").setLevel(level_name.upper())
