# Configuration management

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings  # type: ignore


class Settings(BaseSettings):
    # Application
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Upload limits
    max_payload_bytes: int = 10 * 1024 * 1024  # 10MB

    # Schema Inference
    schema_max_depth: int = 3
    schema_sample_size: int = 5
    schema_merge_strategy: str = "first"  # first or union

    # Storage Decision
    schema_depth_cap: int = 10
    schema_max_top_level_keys: int = 20
    schema_array_record_max_depth: int = 2
    schema_object_max_depth: int = 3

    # Security
    allowed_origins: List[str] = [
        "http://localhost:3000", "http://localhost:8000"]

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()


MERGE_FIRST = "first"
MERGE_UNION = "union"


@dataclass(frozen=True)
class SchemaConfig:
    """
    Tunable caps for schema inference and storage classification.

    Defaults match the values the analyzer has always used; override
    individual fields to tune without touching the algorithms.
    """
    max_depth: int = 3
    sample_size: int = 5
    merge_strategy: str = MERGE_FIRST
    depth_cap: int = 10
    max_top_level_keys: int = 20
    array_record_max_depth: int = 2
    object_max_depth: int = 3

    def __post_init__(self):
        if self.merge_strategy not in (MERGE_FIRST, MERGE_UNION):
            raise ValueError(
                f"Unknown merge strategy: {self.merge_strategy!r}")
        if self.max_depth < 0 or self.depth_cap < 0:
            raise ValueError("Depth limits must be non-negative")
        if self.sample_size < 1:
            raise ValueError("sample_size must be at least 1")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SchemaConfig":
        """Build a config from application settings (env / .env)."""
        settings = settings or get_settings()
        return cls(
            max_depth=settings.schema_max_depth,
            sample_size=settings.schema_sample_size,
            merge_strategy=settings.schema_merge_strategy,
            depth_cap=settings.schema_depth_cap,
            max_top_level_keys=settings.schema_max_top_level_keys,
            array_record_max_depth=settings.schema_array_record_max_depth,
            object_max_depth=settings.schema_object_max_depth,
        )


DEFAULT_SCHEMA_CONFIG = SchemaConfig()
