"""Shared base model for Qwilt CDN API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class QCDNModel(BaseModel):
    """
    Base for every API payload.

    The REST API speaks camelCase JSON; Python code uses snake_case field
    names. Unknown fields returned by the server are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_api(self) -> dict:
        """Serialize to the JSON body expected by the API."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
