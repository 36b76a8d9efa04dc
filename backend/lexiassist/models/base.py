from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """naive datetimes from clients are taken to be UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ApiModel(BaseModel):
    """snake_case in python and postgres, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True,
    )


class PartialUpdate(ApiModel):
    """body of a PUT: only the fields the client sent are written.
    fields listed in `required` may be omitted but never nulled."""

    required: ClassVar[tuple[str, ...]] = ()

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_required_not_null(self):
        for name in self.required:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]
