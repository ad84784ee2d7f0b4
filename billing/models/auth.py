# billing/models/auth.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Principal(BaseModel):
    """The authenticated caller a request runs as."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: str
    company_id: int


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    company_id: int


class LoginOut(BaseModel):
    token: str
    user: UserOut
