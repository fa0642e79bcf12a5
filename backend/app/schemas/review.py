from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ReviewPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)


class ReviewForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    review: ReviewPayload
