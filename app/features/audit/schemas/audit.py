from typing import Optional

from pydantic import BaseModel, Field


class AuditIn(BaseModel):
    url: Optional[str] = None


class AuditScores(BaseModel):
    performance: int = Field(ge=0, le=100)
    accessibility: int = Field(ge=0, le=100)
    seo: int = Field(ge=0, le=100)
