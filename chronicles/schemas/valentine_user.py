"""Valentines participant record (collection `valentines_users`, keyed by enrollment number)."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .schema_utils import RECORD_MODEL_CONFIG, parse_object_id

VALENTINE_USERS_COLLECTION = "valentines_users"


class ValentineUserRecord(BaseModel):
    model_config = RECORD_MODEL_CONFIG

    id: str = Field(alias="_id")
    enrollment_number: str
    full_name: str
    password_hash: str
    has_spun: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, v: Any) -> Any:
        return parse_object_id(v)
