"""Valentines login models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginParams(_CamelModel):
    """Login form. The enrollment number is trimmed and upper-cased before lookup."""

    enrollment_number: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=100)

    @field_validator("enrollment_number", mode="before")
    @classmethod
    def _normalize_enrollment_number(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


class LoginUser(_CamelModel):
    full_name: str
    enrollment_number: str
    has_spun: bool = False


class LoginResult(BaseModel):
    token: str
    max_age: int
    user: LoginUser
