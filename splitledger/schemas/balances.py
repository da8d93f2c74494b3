from pydantic import BaseModel
from typing import List
from splitledger.schemas.settlements import TransferOut

class MemberBalanceOut(BaseModel):
    id: int
    display_name: str
    role: str
    balance: int

class TripBalanceOut(BaseModel):
    trip_id: int
    balances: dict[int, int]
    transfers: List[TransferOut]
    total_spent: int
    optimization_savings: int = 0

class GroupBalanceOut(BaseModel):
    group_id: int
    members: List[MemberBalanceOut]
    balances: dict[int, int]
    transfers: List[TransferOut]
    total_spent: int
