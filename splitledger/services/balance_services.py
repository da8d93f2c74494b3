"""
Scope resolution: load the records of a trip or of every trip in a group,
then run them through the ledger.

Balances are recomputed from the stored records on every call; nothing is
cached between requests.
"""

import logging
from typing import Dict, Iterable, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from splitledger.core.config import settings
from splitledger.core.ledger import ExpenseRecord, SettlementRecord, SplitRecord, Transfer, plan_settlement
from splitledger.core.scope import ScopeRecords, compute_scope, merge_scopes, select_records
from splitledger.models.expense import Expense
from splitledger.models.settlement import Settlement
from splitledger.models.trip import Trip
from splitledger.services.group_services import get_group, get_group_roster, get_trip_for_member
from splitledger.services.member_services import get_members_by_ids
from splitledger.core.dependencies import check_group_membership

logger = logging.getLogger(__name__)

def to_expense_record(expense: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=expense.id,
        payer_id=expense.payer_id,
        amount=expense.amount,
        splits=tuple(SplitRecord(s.member_id, s.amount) for s in expense.splits),
        created_at=expense.created_at,
        deleted_at=expense.deleted_at,
    )

def to_settlement_record(settlement: Settlement) -> SettlementRecord:
    return SettlementRecord(
        id=settlement.id,
        from_id=settlement.from_id,
        to_id=settlement.to_id,
        amount=settlement.amount,
        status=settlement.status,
        created_at=settlement.created_at,
        deleted_at=settlement.deleted_at,
    )

async def load_trip_scopes(db: AsyncSession, trip_ids: Iterable[int]) -> Dict[int, ScopeRecords]:
    """Filtered records per trip; settlements stay attached to the trip they were recorded in."""
    trip_ids = list(trip_ids)
    if not trip_ids:
        return {}

    expense_q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.trip_id.in_(trip_ids))
        .order_by(Expense.created_at, Expense.id)
    )
    expenses = (await db.execute(expense_q)).scalars().all()

    settlement_q = (
        select(Settlement)
        .where(Settlement.trip_id.in_(trip_ids))
        .order_by(Settlement.created_at, Settlement.id)
    )
    settlements = (await db.execute(settlement_q)).scalars().all()

    scopes = {}
    for trip_id in trip_ids:
        scopes[trip_id] = select_records(
            [to_expense_record(e) for e in expenses if e.trip_id == trip_id],
            [to_settlement_record(s) for s in settlements if s.trip_id == trip_id],
        )
    return scopes

def serialize_transfers(transfers: List[Transfer], names: Dict[int, str]) -> list:
    return [
        {
            "from_id": t.from_id,
            "from_name": names.get(t.from_id),
            "to_id": t.to_id,
            "to_name": names.get(t.to_id),
            "amount": t.amount,
        }
        for t in transfers
    ]

async def get_trip_balances(db: AsyncSession, trip_id: int, member_id: int):
    trip = await get_trip_for_member(db, trip_id, member_id)

    scopes = await load_trip_scopes(db, [trip.id])
    result = compute_scope(scopes[trip.id], settings.DUST_THRESHOLD)
    plan = plan_settlement(result.balances, settings.DUST_THRESHOLD)

    names = await get_members_by_ids(db, set(result.balances))

    return {
        "trip_id": trip.id,
        "balances": result.balances,
        "transfers": serialize_transfers(plan.transfers, names),
        "total_spent": result.total_spent,
        "optimization_savings": plan.optimization_savings,
    }

async def get_group_balances(db: AsyncSession, group_id: int, member_id: int):
    """
    One aggregate balance across every trip of the group.

    Settlements recorded against each trip are applied, the same way the
    single-trip view applies them, so both views agree once a trip is settled.
    """
    await get_group(db, group_id)
    await check_group_membership(db, group_id, member_id)

    roster = await get_group_roster(db, group_id)

    res = await db.execute(select(Trip.id).where(Trip.group_id == group_id))
    trip_ids = res.scalars().all()

    scopes = await load_trip_scopes(db, trip_ids)
    result = compute_scope(merge_scopes(scopes.values()), settings.DUST_THRESHOLD)

    names = {mid: name for mid, name, _ in roster}
    # former members can still carry a balance
    missing = set(result.balances) - set(names)
    names.update(await get_members_by_ids(db, missing))

    logger.debug("Group %s balances over %d trips: %s", group_id, len(trip_ids), result.balances)

    return {
        "group_id": group_id,
        "members": [
            {
                "id": mid,
                "display_name": name,
                "role": role,
                "balance": result.balances.get(mid, 0),
            }
            for mid, name, role in roster
        ],
        "balances": result.balances,
        "transfers": serialize_transfers(result.transfers, names),
        "total_spent": result.total_spent,
    }
