from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_member
from splitledger.schemas.settlements import SettlementCreate, SettlementOut, SettlementSummaryOut
from splitledger.services.settlement_services import record_settlement, confirm_settlement, undo_settlement, get_settlement_summary

router = APIRouter()

@router.post("/", response_model=SettlementOut, status_code=201)
async def add_settlement(data: SettlementCreate, db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await record_settlement(db, member.id, data)

@router.get("/", response_model=SettlementSummaryOut)
async def settlement_summary(trip_id: int, db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await get_settlement_summary(db, trip_id, member.id)

@router.post("/{settlement_id}/confirm", response_model=SettlementOut)
async def confirm(settlement_id: int, db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await confirm_settlement(db, settlement_id, member.id)

@router.delete("/{settlement_id}")
async def undo(settlement_id: int, db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await undo_settlement(db, settlement_id, member.id)
