#!/usr/bin/env python3
"""
Configuration Management for the Budget Ledger

Handles environment-based configuration with secure defaults and validation.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .currency import DEFAULT_CURRENCY_SYMBOL

# Load environment variables from .env file
load_dotenv()


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class Config:
    """
    Main configuration class for the budget ledger.

    Loads configuration from environment variables with defaults suitable
    for a single-user local ledger.
    """

    environment: Environment

    # Storage
    data_dir: Path
    store_file: Path
    catalog_file: Path | None

    # Ledger settings
    user_id: str = "local"
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    conflict_retries: int = 3
    recent_expense_days: int = 30

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("LEDGER_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_budget_ledger"
            data_dir = Path(os.getenv("LEDGER_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("LEDGER_DATA_DIR", "./data")).expanduser().resolve()

        data_dir.mkdir(parents=True, exist_ok=True)

        store_file = Path(os.getenv("LEDGER_STORE_FILE", str(data_dir / "ledger.json"))).expanduser()
        catalog_env = os.getenv("LEDGER_CATALOG_FILE")
        catalog_file = Path(catalog_env).expanduser() if catalog_env else None

        return cls(
            environment=env,
            data_dir=data_dir,
            store_file=store_file,
            catalog_file=catalog_file,
            user_id=os.getenv("LEDGER_USER_ID", "local"),
            currency_symbol=os.getenv("LEDGER_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL),
            conflict_retries=int(os.getenv("LEDGER_CONFLICT_RETRIES", "3")),
            recent_expense_days=int(os.getenv("LEDGER_RECENT_EXPENSE_DAYS", "30")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.data_dir.exists():
            errors.append(f"data_dir does not exist: {self.data_dir}")

        if self.catalog_file is not None and not self.catalog_file.exists():
            errors.append(f"catalog_file does not exist: {self.catalog_file}")

        if not self.user_id.strip():
            errors.append("LEDGER_USER_ID must not be empty")

        if self.conflict_retries < 1:
            errors.append("Conflict retries must be at least 1")
        if self.recent_expense_days < 1:
            errors.append("Recent expense window must be at least 1 day")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        # Configure format based on environment
        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        result: dict[str, Any] = {}
        for field_name, field_value in self.__dict__.items():
            if isinstance(field_value, Path):
                result[field_name] = str(field_value)
            elif isinstance(field_value, Enum):
                result[field_name] = field_value.value
            else:
                result[field_name] = field_value
        return result


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
