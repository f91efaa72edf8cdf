"""
Service settings (pydantic-settings).

Values come from the process environment or a project-root .env file.
Read them through get_settings(); never instantiate Settings per request.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# Hard ceiling for a single catalog fetch (no pagination beyond one page)
MAX_CATALOG_ROWS = 250


class Settings(BaseSettings):
    """
    Facet catalog settings.

    Required:
        SUPABASE_URL, SUPABASE_KEY

    Common overrides:
        ENVIRONMENT (development | staging | production), LOG_JSON,
        CORS_ORIGINS (comma separated or JSON list), CATALOG_ROW_LIMIT (1-250),
        PRODUCTS_TABLE, PRICE_BANDS_TABLE, VENDORS_TABLE
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")
    log_json: bool = Field(default=False, description="Emit JSON logs instead of console output")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")

    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=[
            "http://localhost:8081",
            "http://localhost:19006",
            "http://127.0.0.1:8081",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        # NoDecode hands env values over raw: "a, b" or '["a", "b"]'
        if isinstance(v, str):
            if v.strip().startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Supabase Configuration
    # ==========================================================================
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_key: str = Field(..., description="Supabase API key")

    # ==========================================================================
    # Catalog Configuration
    # ==========================================================================
    catalog_row_limit: int = Field(
        default=MAX_CATALOG_ROWS,
        description="Max product rows fetched in a single catalog load"
    )
    products_table: str = Field(default="products", description="Product rows table")
    price_bands_table: str = Field(default="price_bands", description="Price band table")
    vendors_table: str = Field(default="vendor", description="Vendor table")
    currency: str = Field(default="PKR", description="Currency code stored on prices")

    @field_validator("catalog_row_limit")
    @classmethod
    def check_catalog_row_limit(cls, v: int) -> int:
        if v < 1 or v > MAX_CATALOG_ROWS:
            raise ValueError(f"catalog_row_limit must be between 1 and {MAX_CATALOG_ROWS}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the cached settings instance.

    Looks for a .env file in the project root before falling back to the
    process environment.

    Raises:
        pydantic.ValidationError: If required environment variables are missing
    """
    env_file = Path(__file__).parent.parent.parent / ".env"
    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """Uncached Settings with test credentials; keyword overrides win."""
    values = {
        "supabase_url": "https://test.supabase.co",
        "supabase_key": "test-key",
        "environment": "testing",
        "debug": True,
    }
    values.update(overrides)
    return Settings(**values)
