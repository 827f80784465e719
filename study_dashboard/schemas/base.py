"""Shared pydantic base: camelCase on the wire, snake_case in Python."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from study_dashboard.core.clock import to_naive_utc


class CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def parse_timestamp(value):
    """Accept ISO timestamps or bare YYYY-MM-DD dates; store naive UTC."""
    if isinstance(value, str) and len(value) == 10:
        value = f"{value}T00:00:00"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Invalid date format")
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return value
