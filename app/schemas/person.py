"""
People schemas.

POST  /people         → PersonCreate → PersonResponse
PATCH /people/{id}    → PersonUpdate → PersonResponse
"""
from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator


class PersonCreate(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=256)]
    work_function: Optional[str] = None
    characteristics: Optional[str] = None
    biases: Optional[str] = None
    communication_style: Optional[str] = None
    relationship_type: Optional[str] = Field(default=None, examples=["manager", "peer"])
    profile_picture: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("name must not be empty after stripping whitespace")
        return stripped


class PersonUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: Optional[Annotated[str, Field(min_length=1, max_length=256)]] = None
    work_function: Optional[str] = None
    characteristics: Optional[str] = None
    biases: Optional[str] = None
    communication_style: Optional[str] = None
    relationship_type: Optional[str] = None
    profile_picture: Optional[str] = None


class PersonResponse(BaseModel):
    id: str
    name: str
    work_function: Optional[str] = None
    characteristics: Optional[str] = None
    biases: Optional[str] = None
    communication_style: Optional[str] = None
    relationship_type: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: str
    updated_at: str


class PersonListResponse(BaseModel):
    total: int
    items: list[PersonResponse]
