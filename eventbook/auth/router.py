from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from eventbook.database import get_db
from eventbook.auth.schemas import UserCreate, User as UserSchema, UserUpdate, LoginRequest, AuthResponse
from eventbook.auth.service import UserService
from eventbook.auth.utils import create_access_token
from eventbook.auth.dependencies import get_current_user
from eventbook.errors import AuthError
from eventbook.models import User
from eventbook.responses import success

router = APIRouter()

def _auth_payload(request: Request, user: User) -> dict:
    token = create_access_token(
        data={"sub": str(user.id), "role": user.role},
        settings=request.app.state.settings,
    )
    return AuthResponse(id=user.id, name=user.name, email=user.email, role=user.role, token=token).model_dump()

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, request: Request, db: Session = Depends(get_db)):
    """Register a new user"""
    db_user = UserService.create_user(db=db, user=user)
    return success(_auth_payload(request, db_user), message="User registered successfully")

@router.post("/login")
def login(login_data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Login with email and password"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise AuthError("Invalid email or password")
    return success(_auth_payload(request, user), message="Login successful")

@router.get("/me")
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return success(UserSchema.model_validate(current_user).model_dump(mode="json"))

@router.put("/me")
def update_user_profile(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update current user profile"""
    updated_user = UserService.update_user(db=db, user_id=current_user.id, user_update=user_update)
    return success(UserSchema.model_validate(updated_user).model_dump(mode="json"), message="Profile updated successfully")
