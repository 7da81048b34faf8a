from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Literal

SettingType = Literal["text", "number", "boolean", "date"]


class SettingPatch(BaseModel):
    key: str
    value: str


class SettingCreate(BaseModel):
    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)
    value_type: SettingType = "text"
    description: str = Field("", max_length=500)


class SettingOut(BaseModel):
    key: str
    value: str
    value_type: str
    description: Optional[str] = None
    updated_by: Optional[int] = None
    updated_on: Optional[datetime] = None

    class Config:
        from_attributes = True
