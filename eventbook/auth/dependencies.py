from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import Optional
from eventbook.database import get_db
from eventbook.auth.utils import verify_token
from eventbook.auth.service import UserService
from eventbook.errors import AuthError, ForbiddenError
from eventbook.models import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    if not token:
        raise AuthError("Not authorized, no token")
    
    credentials_exception = AuthError("Not authorized, token failed")
    token_data = verify_token(token, request.app.state.settings, credentials_exception)
    
    user = UserService.get_user_by_id(db, user_id=token_data["user_id"])
    if user is None or not user.is_active:
        raise credentials_exception
    
    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require admin role for access"""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user
