"""
Centralized settings and path configuration for the rate calculator.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DEFAULT_STORAGE_KEY = "freelance-calculator-storage"
DEFAULT_EXCHANGE_API_URL = "https://v6.exchangerate-api.com/v6"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Directory holding the persisted history snapshot(s)
    data_dir: Path

    # History store
    storage_key: str = DEFAULT_STORAGE_KEY
    history_capacity: int = 10

    # Exchange-rate provider
    exchange_api_url: str = DEFAULT_EXCHANGE_API_URL
    exchange_api_key: Optional[str] = None
    base_currency: str = "USD"
    request_timeout_s: float = 10.0

    # Logging
    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and FREELANCE_RATES_* environment variables."""
        root = project_root or get_project_root()

        data_dir = os.environ.get('FREELANCE_RATES_DATA_DIR')

        return cls(
            project_root=root,
            data_dir=Path(data_dir) if data_dir else root / 'data',
            storage_key=os.environ.get('FREELANCE_RATES_STORAGE_KEY', DEFAULT_STORAGE_KEY),
            exchange_api_url=os.environ.get('FREELANCE_RATES_EXCHANGE_API_URL', DEFAULT_EXCHANGE_API_URL),
            exchange_api_key=os.environ.get('FREELANCE_RATES_EXCHANGE_API_KEY') or None,
            log_level=os.environ.get('FREELANCE_RATES_LOG_LEVEL', 'INFO').upper(),
        )

    @property
    def history_file(self) -> Path:
        """Path of the JSON snapshot written for the configured storage key."""
        return self.data_dir / f"{self.storage_key}.json"


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
