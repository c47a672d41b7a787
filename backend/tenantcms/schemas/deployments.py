from typing import Literal, Optional

from pydantic import BaseModel, Field


class DeployRequest(BaseModel):
    tenant_id: str = Field(..., min_length=1)


class BuildCallback(BaseModel):
    deployment_id: str = Field(..., min_length=1)
    status: Literal["SUCCESS", "FAILED"]
    build_log: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
