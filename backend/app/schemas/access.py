from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional


class AccessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_code: Optional[str] = Field(default=None, alias="accessCode")

    @field_validator("access_code", mode="before")
    @classmethod
    def coerce_numeric_code(cls, value: Any) -> Any:
        # Numeric codes sent as JSON numbers are compared as text
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class AccessResponse(BaseModel):
    success: bool
    message: str
