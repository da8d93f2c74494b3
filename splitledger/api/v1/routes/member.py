from fastapi import APIRouter, Depends, HTTPException, Response, Cookie
from sqlalchemy.ext.asyncio import AsyncSession
from splitledger.db.session import get_db
from splitledger.schemas.member import MemberCreate, MemberOut, MemberLogin
from splitledger.models.member import Member
from splitledger.services.member_services import create_member, get_member_by_id
from splitledger.core.dependencies import authenticate_member, get_current_member
from splitledger.core.jwt_config import create_access_token, create_refresh_token, decode_token

router = APIRouter()

def _set_auth_cookies(response: Response, access: str, refresh: str):
    response.set_cookie("access_token", access, httponly=True, secure=False, samesite="lax")
    response.set_cookie("refresh_token", refresh, httponly=True, secure=False, samesite="lax")

@router.post("/register", response_model=MemberOut, status_code=201)
async def register_member(data: MemberCreate, db: AsyncSession = Depends(get_db)):
    try:
        return await create_member(db, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/login", response_model=MemberOut)
async def login_member(data: MemberLogin, response: Response, db: AsyncSession = Depends(get_db)):
    member = await authenticate_member(db, data.email, data.password)

    if not member:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    access = create_access_token({"sub": str(member.id)})
    refresh = create_refresh_token({"sub": str(member.id)})

    member.refresh_token = refresh
    await db.commit()

    _set_auth_cookies(response, access, refresh)
    return member

@router.get("/me", response_model=MemberOut)
async def read_member_me(current_member: Member = Depends(get_current_member)):
    return current_member

@router.post("/refresh", response_model=MemberOut)
async def refresh_token(
    response: Response,
    db: AsyncSession = Depends(get_db),
    refresh_cookie: str | None = Cookie(None, alias="refresh_token")
):
    if refresh_cookie is None:
        raise HTTPException(status_code=401, detail="Refresh token missing")

    payload = decode_token(refresh_cookie, expected_type="refresh")
    member = await get_member_by_id(db, int(payload.get("sub", 0)))

    if not member:
        raise HTTPException(401, "Member not found")

    if member.refresh_token != refresh_cookie:
        raise HTTPException(401, "Refresh token revoked or rotated")

    new_access = create_access_token({"sub": str(member.id)})
    new_refresh = create_refresh_token({"sub": str(member.id)})

    member.refresh_token = new_refresh
    await db.commit()

    _set_auth_cookies(response, new_access, new_refresh)
    return member

@router.post("/logout")
async def logout_member(response: Response, db: AsyncSession = Depends(get_db), current_member: Member = Depends(get_current_member)):
    current_member.refresh_token = None
    await db.commit()

    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return {"message": "Logged out"}
