"""Pydantic base models for MongoDB documents.

Documents keep their primary key in `_id`; models expose it as `id`.
"""

from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class Document(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Dump for insertion, with `id` stored as `_id`."""
        data = self.model_dump()
        data["_id"] = data.pop("id")
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        return [cls.model_validate(item) async for item in cursor]


class MongoModel(Document):
    """Document keyed by a server-generated UUID."""

    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)


class ExternalKeyModel(Document):
    """Document keyed by an id issued elsewhere (e.g. the identity provider)."""

    id: str = Field(alias="_id", serialization_alias="id")
