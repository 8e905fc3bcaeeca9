import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/chatkeep.db")
    DB_ENABLE_WAL = _flag("DB_ENABLE_WAL", "True")
    DEBUG = _flag("DEBUG", "False")
    APP_VERSION = os.getenv("APP_VERSION", "0.1.0")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "claude-sonnet-4-20250514")
    DEFAULT_USER_EMAIL = os.getenv("DEFAULT_USER_EMAIL", "user@example.com")
    DEFAULT_USER_NAME = os.getenv("DEFAULT_USER_NAME", "Default User")
    DEFAULT_PROJECT_COLOR = os.getenv("DEFAULT_PROJECT_COLOR", "#CC785C")

    TOKENIZER_ENCODING = os.getenv("TOKENIZER_ENCODING", "cl100k_base")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "chatkeep.log")


settings = Settings()
