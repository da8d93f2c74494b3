from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.dependencies import get_current_member
from splitledger.services.group_services import create_group, add_member, list_groups_for_member, list_group_members, create_trip, list_trips
from splitledger.services.balance_services import get_group_balances
from splitledger.schemas.group import GroupCreate, GroupOut, GroupMemberOut, TripCreate, TripOut
from splitledger.schemas.member import MemberOut
from splitledger.schemas.balances import GroupBalanceOut

router = APIRouter()

@router.post("/", response_model=GroupOut, status_code=201, description="create new group")
async def create_new_group(data: GroupCreate, db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await create_group(db, data.name, member.id)

@router.get("/my-groups", response_model=list[GroupOut], description="groups of the current member")
async def my_groups(db: AsyncSession = Depends(get_db), member = Depends(get_current_member)):
    return await list_groups_for_member(db, member.id)

@router.post("/{group_id}/members/{member_id}", response_model=GroupMemberOut, status_code=201)
async def add_member_to_group(
    group_id: int,
    member_id: int,
    db: AsyncSession = Depends(get_db),
    current_member = Depends(get_current_member)
):
    return await add_member(db, group_id, member_id, current_member.id)

@router.get("/{group_id}/members", response_model=list[MemberOut])
async def group_members(group_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await list_group_members(db, group_id, current_member.id)

@router.post("/{group_id}/trips", response_model=TripOut, status_code=201)
async def new_trip(group_id: int, data: TripCreate, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await create_trip(db, group_id, data.name, current_member.id)

@router.get("/{group_id}/trips", response_model=list[TripOut])
async def group_trips(group_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await list_trips(db, group_id, current_member.id)

@router.get("/{group_id}/balances", response_model=GroupBalanceOut, description="balances across every trip of the group")
async def group_balances(group_id: int, db: AsyncSession = Depends(get_db), current_member = Depends(get_current_member)):
    return await get_group_balances(db, group_id, current_member.id)
