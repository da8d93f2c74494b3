from pydantic import BaseModel, Field
from datetime import datetime

class GroupCreate(BaseModel):
    name: str = Field(min_length=1)

class GroupOut(BaseModel):
    id: int
    name: str
    owner_id: int
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class GroupMemberOut(BaseModel):
    id: int
    group_id: int
    member_id: int
    role: str

    class Config:
        from_attributes = True

class TripCreate(BaseModel):
    name: str = Field(min_length=1)

class TripOut(BaseModel):
    id: int
    group_id: int
    name: str
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True
