"""Configuration management for tfusage.

Loads environment variables (optionally from a .env file in the working
directory) and provides centralized config access.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Keep in sync with pyproject.toml
__version__ = "0.3.0"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, env_path: str | Path | None = None):
        """Initialize config by loading .env file.

        Args:
            env_path: Explicit .env location. Defaults to ./.env
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"
        load_dotenv(env_path)

        self._validate()

    def _validate(self):
        """Validate environment-provided values.

        Raises:
            ValueError: If TFUSAGE_FILE_EXTENSION is not a dotted extension
        """
        extension = self.file_extension
        if not extension.startswith(".") or len(extension) < 2:
            raise ValueError(
                f"TFUSAGE_FILE_EXTENSION must look like '.tf', got {extension!r}"
            )

    @property
    def file_extension(self) -> str:
        """Extension identifying configuration files.

        Returns:
            Extension string including the leading dot (default '.tf')
        """
        return os.getenv("TFUSAGE_FILE_EXTENSION", ".tf")

    @property
    def strict_module_refs(self) -> bool:
        """Whether module references require a trailing word boundary.

        Returns:
            True if TFUSAGE_STRICT_MODULE_REFS is set to a truthy value
        """
        return _env_flag("TFUSAGE_STRICT_MODULE_REFS")

    @property
    def verbose(self) -> bool:
        """Whether debug traces are printed by default."""
        return _env_flag("TFUSAGE_VERBOSE")


# Singleton instance
_config = None


def get_config() -> Config:
    """Get or create singleton Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config
    _config = None
