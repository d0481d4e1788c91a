import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from eventbook.models import User
from eventbook.auth.schemas import UserCreate, UserUpdate
from eventbook.auth.utils import get_password_hash, verify_password
from eventbook.errors import ConflictError
from typing import Optional

logger = logging.getLogger(__name__)

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email.lower()).first()
    
    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()
    
    @staticmethod
    def create_user(db: Session, user: UserCreate, role: str = "user") -> User:
        """Create a new user"""
        db_user = User(
            name=user.name,
            email=user.email.lower(),
            password=get_password_hash(user.password),
            phone=user.phone,
            role=role,
        )
        
        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ConflictError("User already exists with this email")
        
        logger.info("Registered user %s (%s)", db_user.id, role)
        return db_user
    
    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password; inactive accounts never authenticate"""
        user = UserService.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password):
            return None
        return user
    
    @staticmethod
    def update_user(db: Session, user_id: int, user_update: UserUpdate) -> Optional[User]:
        """Update profile fields (name and phone only)"""
        db_user = UserService.get_user_by_id(db, user_id)
        if not db_user:
            return None
        
        for field, value in user_update.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(db_user, field, value)
        
        db.commit()
        db.refresh(db_user)
        return db_user
