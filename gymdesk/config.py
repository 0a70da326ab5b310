from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    API_V1_PREFIX: str = "/api/v1"
    DATABASE_URL: str = "sqlite:///./gymdesk.db"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    GYM_NAME: str = "INDOFIT GYM"

    # Membership rules
    EXPIRING_STATUS_DAYS: int = 3  # "expiring" badge window
    EXPIRY_NOTICE_DAYS: int = 4  # notification horizon
    AUTO_ARCHIVE_GRACE_MONTHS: int = 1

    # Identifiers and messaging
    TRAINER_ID_PREFIX: str = "TR"
    WHATSAPP_COUNTRY_CODE: str = "91"

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()

settings = get_settings()
