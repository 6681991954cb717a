"""
Pydantic schema for the Disease entity.

A single ``DiseaseDTO`` is used for requests and responses.  ``id`` is
absent on creation requests and present everywhere else; the REST
layer enforces which state each operation expects.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..core.db import SQLITE_MAX_INTEGER, SQLITE_MIN_INTEGER


class DiseaseDTO(BaseModel):
    """Disease as exchanged over the API."""

    id: Optional[int] = Field(None, ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER, examples=[1])
    name: str = Field(..., min_length=1, max_length=255, examples=["flu"])
    description: Optional[str] = Field(
        None, max_length=4000, examples=["Contagious respiratory illness"]
    )

    model_config = {
        "from_attributes": True,
    }

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v
