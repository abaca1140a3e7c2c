# backend/app/models.py

import json
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AdventureRequest(BaseModel):
    """Adventure parameters; every value is passed into the prompt verbatim."""

    model_config = ConfigDict(extra="ignore")

    system: str = ""
    players: str = ""
    experience: str = ""
    genre: str = ""
    tone: str = ""
    concept: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        # Rendered as the JSON carried them (true, [1, 2], {"n": 4}); null becomes empty.
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (bool, list, dict)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)


class JobAccepted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: str = Field(alias="jobId")


class JobStatusResponse(BaseModel):
    status: str
    data: Optional[str] = None


class AdventureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    adventure_text: str = Field(alias="adventureText")


class ErrorResponse(BaseModel):
    error: str
