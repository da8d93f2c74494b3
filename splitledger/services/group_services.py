import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from splitledger.models.group import Group
from splitledger.models.group_member import GroupMember
from splitledger.models.member import Member
from splitledger.models.trip import Trip
from splitledger.core.dependencies import check_group_membership

logger = logging.getLogger(__name__)

async def create_group(db: AsyncSession, name: str, owner_id: int):
    group = Group(name=name, owner_id=owner_id)
    db.add(group)
    await db.flush()

    db.add(GroupMember(group_id=group.id, member_id=owner_id, role="owner"))

    await db.commit()
    await db.refresh(group)

    logger.info("Member %s created group %s", owner_id, group.id)
    return group

async def get_group(db: AsyncSession, group_id: int):
    res = await db.execute(select(Group).where(Group.id == group_id))
    group = res.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group doesn't exist")

    return group

async def add_member(db: AsyncSession, group_id: int, member_id: int, owner_id: int):
    group = await get_group(db, group_id)

    if group.owner_id != owner_id:
        raise HTTPException(403, "Only the group owner can add members")

    res = await db.execute(select(Member.id).where(Member.id == member_id))
    if res.scalar_one_or_none() is None:
        raise HTTPException(404, "Member doesn't exist")

    existing = await db.execute(
        select(GroupMember).where(
            GroupMember.group_id == group_id,
            GroupMember.member_id == member_id
        )
    )
    if existing.scalar_one_or_none():
        raise HTTPException(400, "Member already exists in this group")

    new_member = GroupMember(group_id=group_id, member_id=member_id, role="member")
    db.add(new_member)
    await db.commit()
    await db.refresh(new_member)
    return new_member

async def list_groups_for_member(db: AsyncSession, member_id: int):
    q = (
        select(Group)
        .join(GroupMember, GroupMember.group_id == Group.id)
        .where(GroupMember.member_id == member_id)
        .order_by(Group.id)
    )
    result = await db.execute(q)
    return result.scalars().all()

async def get_group_roster(db: AsyncSession, group_id: int):
    """(member_id, display_name, role) for every member of the group, in join order."""
    q = (
        select(Member.id, Member.display_name, GroupMember.role)
        .join(GroupMember, GroupMember.member_id == Member.id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    result = await db.execute(q)
    return result.all()

async def list_group_members(db: AsyncSession, group_id: int, member_id: int):
    await check_group_membership(db, group_id, member_id)

    q = (
        select(Member)
        .join(GroupMember, GroupMember.member_id == Member.id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    result = await db.execute(q)
    return result.scalars().all()

async def get_group_member_ids(db: AsyncSession, group_id: int) -> set:
    res = await db.execute(select(GroupMember.member_id).where(GroupMember.group_id == group_id))
    return set(res.scalars().all())

async def create_trip(db: AsyncSession, group_id: int, name: str, member_id: int):
    await get_group(db, group_id)
    await check_group_membership(db, group_id, member_id)

    trip = Trip(group_id=group_id, name=name)
    db.add(trip)
    await db.commit()
    await db.refresh(trip)

    logger.info("Member %s created trip %s in group %s", member_id, trip.id, group_id)
    return trip

async def list_trips(db: AsyncSession, group_id: int, member_id: int):
    await check_group_membership(db, group_id, member_id)

    res = await db.execute(
        select(Trip).where(Trip.group_id == group_id).order_by(Trip.created_at.desc(), Trip.id.desc())
    )
    return res.scalars().all()

async def get_trip_for_member(db: AsyncSession, trip_id: int, member_id: int):
    res = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = res.scalar_one_or_none()

    if not trip:
        raise HTTPException(404, "Trip doesn't exist")

    await check_group_membership(db, trip.group_id, member_id)
    return trip
