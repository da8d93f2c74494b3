from pydantic import BaseModel, Field

class MemberCreate(BaseModel):
    display_name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=8)

class MemberLogin(BaseModel):
    email: str
    password: str

class MemberOut(BaseModel):
    id: int
    display_name: str
    email: str

    class Config:
        from_attributes = True
