"""
Common response models and utilities.

Error schema and pagination envelope shared by link endpoints.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str = Field(description="Error message")


class Pagination(BaseModel):
    """Page-based pagination block."""

    page: int = Field(ge=1, description="1-based page number")
    limit: int = Field(ge=1, description="Page size")
    total: int = Field(ge=0, description="Total matching records")
    pages: int = Field(ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=-(-total // limit))
