"""Shared configuration for persisted domain records."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base class for records stored in the JSON collections.

    Attributes are snake_case in Python and camelCase on disk, so files
    written by earlier versions of the app keep loading.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def with_changes(self, **changes):
        """Return a re-validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)
