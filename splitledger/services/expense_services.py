import logging
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from fastapi import HTTPException
from splitledger.models.expense import Expense
from splitledger.models.expense_split import ExpenseSplit
from splitledger.schemas.expense import ExpenseCreate
from splitledger.services.group_services import get_trip_for_member, get_group_member_ids
from splitledger.core.ledger import equal_split

logger = logging.getLogger(__name__)

def _resolve_shares(data: ExpenseCreate, group_member_ids: set) -> list:
    """Validated (member_id, amount) shares for a new expense."""
    if data.amount <= 0:
        raise HTTPException(400, "Expense amount must be positive")

    if data.splits:
        shares = [(s.member_id, s.amount) for s in data.splits]
    else:
        participants = data.participants or sorted(group_member_ids)
        if len(participants) != len(set(participants)):
            raise HTTPException(400, "Duplicate members found in participants")
        shares = list(zip(participants, equal_split(data.amount, len(participants))))

    member_ids = [mid for mid, _ in shares]

    if len(member_ids) != len(set(member_ids)):
        raise HTTPException(400, "Duplicate members found in splits")

    if any(amount <= 0 for _, amount in shares):
        raise HTTPException(400, "Split amounts must be positive")

    if sum(amount for _, amount in shares) != data.amount:
        raise HTTPException(400, "Sum of split amounts must equal total amount")

    if not set(member_ids) <= group_member_ids:
        raise HTTPException(400, "Some members in split are not group members")

    return shares

async def create_expense(db: AsyncSession, trip_id: int, data: ExpenseCreate, payer_id: int):
    trip = await get_trip_for_member(db, trip_id, payer_id)
    group_member_ids = await get_group_member_ids(db, trip.group_id)

    shares = _resolve_shares(data, group_member_ids)

    expense = Expense(
        trip_id=trip.id,
        payer_id=payer_id,
        amount=data.amount,
        description=data.description
    )
    db.add(expense)
    await db.flush()

    for member_id, amount in shares:
        db.add(ExpenseSplit(expense_id=expense.id, member_id=member_id, amount=amount))

    await db.commit()

    logger.info("Member %s logged expense %s (%s) on trip %s", payer_id, expense.id, data.amount, trip.id)
    return await get_expense(db, expense.id)

async def get_expense(db: AsyncSession, expense_id: int):
    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.id == expense_id, Expense.deleted_at.is_(None))
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    return expense

async def list_trip_expenses(db: AsyncSession, trip_id: int, member_id: int):
    await get_trip_for_member(db, trip_id, member_id)

    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.trip_id == trip_id, Expense.deleted_at.is_(None))
        .order_by(Expense.created_at.desc(), Expense.id.desc())
    )
    res = await db.execute(q)
    return res.scalars().all()

async def delete_expense(db: AsyncSession, trip_id: int, expense_id: int, member_id: int):
    await get_trip_for_member(db, trip_id, member_id)
    expense = await get_expense(db, expense_id)

    if expense.trip_id != trip_id:
        raise HTTPException(404, "Expense not found")

    # only the payer can delete
    if expense.payer_id != member_id:
        raise HTTPException(403, "You cannot delete this expense")

    # soft delete, splits stay for the audit trail
    expense.deleted_at = datetime.now(timezone.utc)
    await db.commit()

    logger.info("Member %s deleted expense %s", member_id, expense_id)
    return {"status": "deleted"}
