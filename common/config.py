import os
import logging
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel

from common.models import RowPolicy, SchemaDescriptor

load_dotenv()
logger = logging.getLogger(__name__)

# ENV:
# GOOGLE_SHEETS_ID / GOOGLE_SHEETS_GID / GOOGLE_SHEETS_NAME
# SHEET_SCHEMA=variant_a|variant_b  (or SHEET_SCHEMA_FILE=<descriptor.json>)
# ROW_POLICY=nonzero_total|accept_all  (default: the schema's own)
# DATA_SOURCE=sheets|demo
# REFRESH_INTERVAL_SECONDS=30, HTTP_TIMEOUT_SECONDS (optional)
# OUTPUT_DIR=./output, LOG_LEVEL=INFO

DEFAULT_SHEET_ID = "11W6vDoREHNMCNhaPNh50VBQ69iprItV9Ei2vsDh-JTE"
DEFAULT_SHEET_GID = "0"
DEFAULT_SHEET_NAME = "car-data-analytics"
DEFAULT_SCHEMA = "variant_a"
DEFAULT_REFRESH_SECONDS = 30.0
DATA_SOURCES = ("sheets", "demo")


class ConfigError(Exception):
    pass


class Settings(BaseModel):
    sheet_id: str = DEFAULT_SHEET_ID
    sheet_gid: str = DEFAULT_SHEET_GID
    sheet_name: str = DEFAULT_SHEET_NAME
    schema_name: str = DEFAULT_SCHEMA
    schema_file: Optional[str] = None
    row_policy: Optional[RowPolicy] = None
    data_source: str = "sheets"
    demo_count: int = 12
    refresh_interval_seconds: float = DEFAULT_REFRESH_SECONDS
    http_timeout_seconds: Optional[float] = None
    output_dir: str = os.path.join(os.getcwd(), "output")
    log_level: str = "INFO"

    def schema_descriptor(self) -> SchemaDescriptor:
        from data_processing.sheet_schema import get_builtin_schema, load_schema_file
        from data_processing.validators import SchemaError
        try:
            if self.schema_file:
                return load_schema_file(self.schema_file)
            return get_builtin_schema(self.schema_name)
        except (SchemaError, OSError, ValueError) as e:
            raise ConfigError(f"cannot load sheet schema: {e}") from e

    def effective_row_policy(self) -> RowPolicy:
        return self.row_policy or self.schema_descriptor().row_policy


def _env(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


def _float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be > 0, got {raw!r}")
    return value


def load_settings() -> Settings:
    """Read Settings from the environment (.env already loaded)."""
    sheet_id = _env("GOOGLE_SHEETS_ID")
    if not sheet_id:
        logger.warning("GOOGLE_SHEETS_ID not found in environment variables. Using fallback ID.")
        sheet_id = DEFAULT_SHEET_ID

    policy_raw = _env("ROW_POLICY")
    try:
        policy = RowPolicy(policy_raw.lower()) if policy_raw else None
    except ValueError:
        raise ConfigError(f"ROW_POLICY must be one of {[p.value for p in RowPolicy]}, got {policy_raw!r}")

    source = (_env("DATA_SOURCE") or "sheets").lower()
    if source not in DATA_SOURCES:
        raise ConfigError(f"DATA_SOURCE must be one of {list(DATA_SOURCES)}, got {source!r}")

    settings = Settings(
        sheet_id=sheet_id,
        sheet_gid=_env("GOOGLE_SHEETS_GID") or DEFAULT_SHEET_GID,
        sheet_name=_env("GOOGLE_SHEETS_NAME") or DEFAULT_SHEET_NAME,
        schema_name=_env("SHEET_SCHEMA") or DEFAULT_SCHEMA,
        schema_file=_env("SHEET_SCHEMA_FILE"),
        row_policy=policy,
        data_source=source,
        refresh_interval_seconds=_float_env("REFRESH_INTERVAL_SECONDS", DEFAULT_REFRESH_SECONDS),
        http_timeout_seconds=_float_env("HTTP_TIMEOUT_SECONDS", None),
        output_dir=_env("OUTPUT_DIR") or os.path.join(os.getcwd(), "output"),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )
    # fail at startup, not on the first refresh
    settings.schema_descriptor()
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings; main and the controllers share this one load."""
    return load_settings()
