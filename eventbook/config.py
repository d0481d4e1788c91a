from functools import lru_cache

from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Database
    DB_HOST: str = "localhost"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "event_booking"
    DB_PORT: int = 3306
    DB_POOL_SIZE: int = 10
    DATABASE_URL: Optional[str] = None
    
    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    
    # Application
    PROJECT_NAME: str = "EventBook Ticket Booking API"
    API_PREFIX: str = "/api"
    PORT: int = 5000
    NODE_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    BOOKING_RETRY_ATTEMPTS: int = 3
    
    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
        )
    
    @property
    def is_development(self) -> bool:
        return self.NODE_ENV == "development"
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

@lru_cache
def get_settings() -> Settings:
    """Settings from the environment, loaded on first use"""
    return Settings()
