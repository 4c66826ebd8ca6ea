"""
Configuration management using environment variables.
Handles catalog and logging settings with validation and defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class CatalogConfig(BaseSettings):
    """
    Configuration class for the catalog store and logging.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Catalog Configuration
    loan_period_days: int = Field(default=14, description="Length of the borrow window in days")
    recommendation_count: int = Field(default=3, description="Books returned by recommendations")
    seed_catalog: bool = Field(default=True, description="Load the starter catalog at startup")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator('loan_period_days')
    @classmethod
    def validate_loan_period(cls, v):
        """Ensure the borrow window is reasonable."""
        if v < 1 or v > 365:
            raise ValueError('loan_period_days must be between 1 and 365')
        return v

    @field_validator('recommendation_count')
    @classmethod
    def validate_recommendation_count(cls, v):
        if v < 1:
            raise ValueError('recommendation_count must be at least 1')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = CatalogConfig()
