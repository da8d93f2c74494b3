from pydantic import BaseModel
from typing import List
from datetime import datetime

class SplitInput(BaseModel):
    member_id: int
    amount: int

class ExpenseCreate(BaseModel):
    amount: int
    description: str | None = None
    # explicit shares; when omitted the amount is split equally between participants
    splits: List[SplitInput] | None = None
    participants: List[int] | None = None

class SplitOut(BaseModel):
    member_id: int
    amount: int

    class Config:
        from_attributes = True

class ExpenseOut(BaseModel):
    id: int
    trip_id: int
    payer_id: int
    amount: int
    description: str | None = None
    created_at: datetime | None = None
    splits: List[SplitOut]

    class Config:
        from_attributes = True
