from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

PageStatusLiteral = Literal["DRAFT", "PUBLISHED", "ARCHIVED"]


class PageCreate(BaseModel):
    tenant_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    description: Optional[str] = None
    content: Any = None
    seo: Dict[str, Any] = Field(default_factory=dict)
    status: PageStatusLiteral = "DRAFT"
    template: str = Field("default", min_length=1)
    order: int = 0
    parent_id: Optional[str] = None


class PageUpdate(BaseModel):
    """Partial update; only the keys present in the body are applied."""

    title: str = Field(None, min_length=1)
    slug: str = Field(None, min_length=1)
    description: Optional[str] = None
    content: Any = None
    seo: Dict[str, Any] = None
    status: PageStatusLiteral = None
    template: str = Field(None, min_length=1)
    order: int = None
    parent_id: Optional[str] = None
