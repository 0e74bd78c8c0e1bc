from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chronicles.domain.valentines.auth_models import LoginUser


class LoginIn(BaseModel):
    """Login body as documented in OpenAPI; parsed after the attempt is counted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enrollment_number: str = Field(description="Enrollment number, case-insensitive")
    password: str


class LoginOut(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: LoginUser
