from pydantic import BaseModel, PositiveInt
from typing import List
from datetime import datetime

class SettlementCreate(BaseModel):
    trip_id: int
    to_member_id: int
    amount: PositiveInt
    method: str = "upi"
    note: str | None = None

class SettlementOut(BaseModel):
    id: int
    trip_id: int
    from_id: int
    to_id: int
    amount: int
    status: str
    method: str
    note: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class TransferOut(BaseModel):
    from_id: int
    from_name: str | None = None
    to_id: int
    to_name: str | None = None
    amount: int

class SettlementSummaryOut(BaseModel):
    computed: List[TransferOut]
    recorded: List[SettlementOut]
    balances: dict[int, int]
