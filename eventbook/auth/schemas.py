from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=1, max_length=20)

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)

class User(UserBase):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    phone: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# Returned by register and login
class AuthResponse(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: str
    token: str
