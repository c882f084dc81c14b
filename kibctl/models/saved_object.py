"""
Saved object records returned by the Kibana search API.
"""
from typing import Any, Dict

from pydantic import AliasPath, BaseModel, ConfigDict, Field


class DashboardRecord(BaseModel):
    """
    A saved object found by a title search.

    Built from one element of the ``saved_objects`` array of a ``_find``
    response. ``id`` identifies the object; ``title`` (read from
    ``attributes.title``) is only used for matching and display.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = Field(default="", validation_alias=AliasPath("attributes", "title"))

    @classmethod
    def from_saved_object(cls, raw: Dict[str, Any]) -> "DashboardRecord":
        """Create a record from a decoded saved object."""
        return cls.model_validate(raw)
