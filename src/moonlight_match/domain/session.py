"""Authenticated identity persisted on the device."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

USER_KEY = "mm_user"
TOKEN_KEY = "mm_token"
LOGGED_IN_KEY = "mm_logged_in"
SESSION_KEYS = (USER_KEY, TOKEN_KEY, LOGGED_IN_KEY)


class Session(BaseModel):
    """The current app user as returned by the auth endpoints.

    Field names are snake_case in Python and camelCase on the wire and in
    storage. Unknown server fields are kept so a stored record survives a
    round trip unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
        coerce_numbers_to_str=True,
    )

    id: str
    email: str
    name: str | None = None
    image: str | None = None
    description: str | None = None
    form_response: Any | None = None
    data_retention: bool = False
    is_admin: bool = False
    event_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_record(self) -> dict[str, object]:
        """Return the camelCase record used on the wire and in storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_storage(self) -> str:
        """Serialize for the key-value store."""
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_storage(cls, raw: str) -> "Session":
        """Parse a stored record."""
        return cls.model_validate_json(raw)

    def merged(self, fields: Mapping[str, object]) -> "Session":
        """Return a copy with ``fields`` shallow-merged over this record."""
        record = self.to_record()
        for key, value in fields.items():
            record[_alias_for(key)] = value
        return Session.model_validate(record)


def _alias_for(key: str) -> str:
    field = Session.model_fields.get(key)
    if field is not None and field.alias:
        return field.alias
    return key
