import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.models.member import Member
from splitledger.schemas.member import MemberCreate
from splitledger.core.security import hash_password

logger = logging.getLogger(__name__)

async def get_member_by_email(db: AsyncSession, email: str):
    result = await db.execute(select(Member).where(Member.email == email.lower()))
    return result.scalar_one_or_none()

async def get_member_by_id(db: AsyncSession, id: int):
    result = await db.execute(select(Member).where(Member.id == id))
    return result.scalar_one_or_none()

async def get_members_by_ids(db: AsyncSession, ids) -> dict:
    if not ids:
        return {}
    result = await db.execute(select(Member.id, Member.display_name).where(Member.id.in_(list(ids))))
    return {mid: name for mid, name in result.all()}

async def create_member(db: AsyncSession, data: MemberCreate):
    existing = await get_member_by_email(db, data.email)
    if existing:
        raise ValueError("Member already exists")

    member = Member(
        email=data.email.lower(),
        display_name=data.display_name,
        password_hash=hash_password(data.password)
    )

    db.add(member)
    await db.commit()
    await db.refresh(member)

    logger.info("Registered member %s", member.id)
    return member
