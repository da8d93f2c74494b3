import logging
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from splitledger.core.config import settings
from splitledger.core.scope import ACCEPTED_SETTLEMENT_STATUSES, compute_scope
from splitledger.models.settlement import Settlement
from splitledger.schemas.settlements import SettlementCreate
from splitledger.services.balance_services import load_trip_scopes, serialize_transfers
from splitledger.services.group_services import get_trip_for_member, get_group_member_ids
from splitledger.services.member_services import get_members_by_ids

logger = logging.getLogger(__name__)

async def record_settlement(db: AsyncSession, from_id: int, data: SettlementCreate):
    trip = await get_trip_for_member(db, data.trip_id, from_id)

    if data.to_member_id == from_id:
        raise HTTPException(400, "You cannot settle with yourself")

    if data.to_member_id not in await get_group_member_ids(db, trip.group_id):
        raise HTTPException(400, "Recipient is not a member of this group")

    settlement = Settlement(
        trip_id=trip.id,
        from_id=from_id,
        to_id=data.to_member_id,
        amount=data.amount,
        status="pending",
        method=data.method,
        note=data.note
    )
    db.add(settlement)
    await db.commit()
    await db.refresh(settlement)

    logger.info("Member %s recorded settlement %s of %s to %s", from_id, settlement.id, data.amount, data.to_member_id)
    return settlement

async def get_settlement(db: AsyncSession, settlement_id: int):
    res = await db.execute(
        select(Settlement).where(Settlement.id == settlement_id, Settlement.deleted_at.is_(None))
    )
    settlement = res.scalar_one_or_none()

    if not settlement:
        raise HTTPException(404, "Settlement not found")

    return settlement

async def confirm_settlement(db: AsyncSession, settlement_id: int, member_id: int):
    settlement = await get_settlement(db, settlement_id)

    # only the member who owes can confirm they paid
    if settlement.from_id != member_id:
        raise HTTPException(403, "Only the person who owes can confirm payment")

    if settlement.status in ACCEPTED_SETTLEMENT_STATUSES:
        raise HTTPException(400, "This settlement has already been completed")

    settlement.status = "completed"
    await db.commit()
    await db.refresh(settlement)

    logger.info("Settlement %s completed by member %s", settlement_id, member_id)
    return settlement

async def undo_settlement(db: AsyncSession, settlement_id: int, member_id: int):
    settlement = await get_settlement(db, settlement_id)

    if settlement.from_id != member_id:
        raise HTTPException(403, "Only the payer can undo a settlement")

    settlement.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    logger.info("Settlement %s undone by member %s", settlement_id, member_id)
    return {"status": "undone"}

async def get_settlement_summary(db: AsyncSession, trip_id: int, member_id: int):
    """Suggested transfers for the trip next to every settlement recorded in it."""
    trip = await get_trip_for_member(db, trip_id, member_id)

    scopes = await load_trip_scopes(db, [trip.id])
    result = compute_scope(scopes[trip.id], settings.DUST_THRESHOLD)

    res = await db.execute(
        select(Settlement)
        .where(Settlement.trip_id == trip.id, Settlement.deleted_at.is_(None))
        .order_by(Settlement.created_at.desc(), Settlement.id.desc())
    )
    recorded = res.scalars().all()

    names = await get_members_by_ids(db, set(result.balances))

    return {
        "computed": serialize_transfers(result.transfers, names),
        "recorded": recorded,
        "balances": result.balances,
    }
