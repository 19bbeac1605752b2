from pydantic import BaseModel, Field
from dotenv import load_dotenv
from typing import List, Optional
import os

load_dotenv()


def _split(raw: str) -> List[str]:
    return [p.strip() for p in raw.split(",") if p.strip()]


class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./smarttask.db")
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() in {"1", "true", "yes"}

    # Session tokens are issued by the identity provider; we only verify them.
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "__session")
    session_jwt_key: str = os.getenv("SESSION_JWT_KEY", "")
    session_jwt_algorithms: List[str] = Field(
        default_factory=lambda: _split(os.getenv("SESSION_JWT_ALGORITHMS", "RS256"))
    )
    session_jwt_issuer: Optional[str] = os.getenv("SESSION_JWT_ISSUER") or None
    auth_dev_user_id: Optional[str] = os.getenv("AUTH_DEV_USER_ID") or None

    cors_origins: List[str] = Field(
        default_factory=lambda: _split(os.getenv("CORS_ORIGINS", "http://localhost:5173"))
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = int(os.getenv("PORT", "3000"))

    # command-line client
    api_base_url: str = os.getenv("API_BASE_URL", "http://localhost:3000/api")
    client_session_token: Optional[str] = os.getenv("SMARTTASK_SESSION_TOKEN") or None

settings = Settings()
