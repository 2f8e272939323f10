# src/tabula/core/config.py
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Rows shown on one list page
ROWS_PER_PAGE = 20
# Page links shown in the pagination window
PAGE_WINDOW = 5


class Settings(BaseSettings):
    """Process-wide settings, read from the environment or a .env file."""

    project_name: str = "tabula"
    version: str = "0.1.0"
    database_url: str = "sqlite:///./tabula.db"
    db_schema: Optional[str] = None
    debug: bool = False
    log_level: str = "INFO"
    rows_per_page: int = Field(default=ROWS_PER_PAGE, ge=1)
    page_window: int = Field(default=PAGE_WINDOW, ge=1)

    model_config = SettingsConfigDict(env_prefix="TABULA_", env_file=".env", extra="ignore")


class TableConfig(BaseModel):
    """
    Binding of one table to a request-scoped model.

    Built once at startup and shared read-only by every unit of work.
    """

    table: Optional[str] = None
    db_schema: Optional[str] = None
    namespace: Optional[str] = None
    heading: Optional[str] = None
    # Columns that insert/update are allowed to write
    attributes: FrozenSet[str] = frozenset()
    key_column: str = "id"
    rows_per_page: int = Field(default=ROWS_PER_PAGE, ge=1)
    page_window: int = Field(default=PAGE_WINDOW, ge=1)
    base_path: str = ""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "TableConfig":
        values = {
            "db_schema": settings.db_schema,
            "rows_per_page": settings.rows_per_page,
            "page_window": settings.page_window,
        }
        values.update(overrides)
        return cls(**values)
