from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_member
from splitledger.schemas.expense import ExpenseCreate, ExpenseOut
from splitledger.schemas.balances import TripBalanceOut
from splitledger.services.expense_services import create_expense, list_trip_expenses, delete_expense
from splitledger.services.balance_services import get_trip_balances

router = APIRouter()

@router.post("/{trip_id}/expenses", response_model=ExpenseOut, status_code=201)
async def add_expense(trip_id: int, data: ExpenseCreate, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await create_expense(db, trip_id, data, current_member.id)

@router.get("/{trip_id}/expenses", response_model=list[ExpenseOut])
async def trip_expenses(trip_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await list_trip_expenses(db, trip_id, current_member.id)

@router.delete("/{trip_id}/expenses/{expense_id}")
async def del_expense(trip_id: int, expense_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await delete_expense(db, trip_id, expense_id, current_member.id)

@router.get("/{trip_id}/balances", response_model=TripBalanceOut)
async def trip_balances(trip_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await get_trip_balances(db, trip_id, current_member.id)
