from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenApiModel(ApiModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
