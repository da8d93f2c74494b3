from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.core.jwt_config import decode_token, get_token_from_cookie
from splitledger.core.security import verify_password
from splitledger.models.group_member import GroupMember
from splitledger.models.member import Member
from splitledger.services.member_services import get_member_by_id, get_member_by_email

async def get_current_member(request: Request, db: AsyncSession = Depends(get_db)) -> Member:
    # resolved per request, never memoised across requests
    token = get_token_from_cookie(request)
    payload = decode_token(token)

    member_id = payload.get("sub")
    if member_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    try:
        member = await get_member_by_id(db, int(member_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Could not validate credentials")

    if member is None:
        raise HTTPException(status_code=401, detail="Member not found")

    return member

async def authenticate_member(db: AsyncSession, email: str, password: str):
    member = await get_member_by_email(db, email)
    if not member:
        return None

    if not verify_password(password, member.password_hash):
        return None

    return member

async def check_group_membership(db: AsyncSession, group_id: int, member_id: int) -> GroupMember:
    q = select(GroupMember).where(
        GroupMember.group_id == group_id,
        GroupMember.member_id == member_id
    )
    res = await db.execute(q)
    membership = res.scalar_one_or_none()

    if not membership:
        raise HTTPException(403, "You are not a member of this group")

    return membership
