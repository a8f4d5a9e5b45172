"""SQL flavour differences between the supported durable tiers."""

from datetime import datetime, timezone
from typing import Any


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to timezone-aware UTC (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlDialect:
    """
    Describes how statements are written for one database engine.

    Field keys passed to json_field must already be validated as safe
    identifiers by the caller.
    """

    name = "generic"
    json_type = "TEXT"
    timestamp_type = "TEXT"

    def param(self, index: int) -> str:
        """Placeholder for the 1-based positional parameter ``index``."""
        raise NotImplementedError

    def json_param(self, index: int) -> str:
        return self.param(index)

    def table(self, schema: str, table: str) -> str:
        raise NotImplementedError

    def json_field(self, column: str, key: str) -> str:
        """Expression extracting a scalar metadata field for comparison."""
        raise NotImplementedError

    def filter_value(self, value: Any) -> Any:
        """Convert a scalar filter value to what json_field compares against."""
        raise NotImplementedError

    def encode_timestamp(self, value: datetime) -> Any:
        return to_utc(value)

    def decode_timestamp(self, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        return to_utc(value)


class PostgresDialect(SqlDialect):
    """PostgreSQL: $n placeholders, JSONB metadata, TIMESTAMPTZ columns."""

    name = "postgresql"
    json_type = "JSONB"
    timestamp_type = "TIMESTAMPTZ"

    def param(self, index: int) -> str:
        return f"${index}"

    def json_param(self, index: int) -> str:
        return f"${index}::jsonb"

    def table(self, schema: str, table: str) -> str:
        return f"{schema}.{table}"

    def json_field(self, column: str, key: str) -> str:
        return f"{column} ->> '{key}'"

    def filter_value(self, value: Any) -> Any:
        # ->> yields text: true/false and numbers in their JSON spelling
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class SQLiteDialect(SqlDialect):
    """SQLite: ? placeholders, JSON text metadata, ISO-8601 UTC timestamps."""

    name = "sqlite"

    def param(self, index: int) -> str:
        return "?"

    def table(self, schema: str, table: str) -> str:
        return table

    def json_field(self, column: str, key: str) -> str:
        return f"json_extract({column}, '$.\"{key}\"')"

    def filter_value(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        return value

    def encode_timestamp(self, value: datetime) -> Any:
        # Fixed-width ISO strings sort chronologically
        return to_utc(value).isoformat(timespec="microseconds")


POSTGRES = PostgresDialect()
SQLITE = SQLiteDialect()
