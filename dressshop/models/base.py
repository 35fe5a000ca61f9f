"""Shared pydantic base for records exchanged with the storefront client"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Field names are snake_case in Python and storage, camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
