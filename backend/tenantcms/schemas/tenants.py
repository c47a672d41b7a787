from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GITHUB_REPO_PATTERN = r"^[\w.-]+/[\w.-]+$"


class TenantSettings(BaseModel):
    """Display settings; unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow")

    logo: Optional[str] = None
    primary_color: Optional[str] = None
    description: Optional[str] = None


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    domain: str = Field(..., min_length=1)
    domains: List[str] = Field(default_factory=list)
    settings: TenantSettings = Field(default_factory=TenantSettings)
    github_repo: Optional[str] = Field(None, pattern=GITHUB_REPO_PATTERN)

    @field_validator("name", "domain")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("domain")
    @classmethod
    def lower_domain(cls, value: str) -> str:
        return value.lower()

    def settings_dict(self) -> Dict[str, Any]:
        return self.settings.model_dump(exclude_none=True)


class TenantUpdate(BaseModel):
    name: str = Field(None, min_length=1)
    domain: str = Field(None, min_length=1)
    domains: List[str] = None
    settings: TenantSettings = None
    is_active: bool = None
    github_repo: Optional[str] = Field(None, pattern=GITHUB_REPO_PATTERN)

    @field_validator("domain")
    @classmethod
    def lower_domain(cls, value: str) -> str:
        return value.strip().lower()
