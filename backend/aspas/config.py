# aspas/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Aspas Note API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))

    # CORS origins for frontend (comma separated in CORS_ORIGINS)
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
        if o.strip()
    ]

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")
    access_token_expire_days: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "10"))
    password_reset_ttl_minutes: int = int(os.getenv("PASSWORD_RESET_TTL_MINUTES", "60"))

    # Frontend base URL, used to build the password reset link
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Resend (transactional mail). Without an API key mail is disabled.
    resend_api_key: str | None = os.getenv("RESEND_API_KEY")
    email_sender: str | None = os.getenv("EMAIL_SENDER")

    # Login rate limiting
    rate_limit_enabled: bool = _env_flag("RATE_LIMIT_ENABLED", "true")
    rate_limit_redis_url: str | None = os.getenv("RATE_LIMIT_REDIS_URL")
    login_window_ms: int = int(os.getenv("LOGIN_RATE_LIMIT_WINDOW_MS", "900000"))  # 15 minutes
    login_max_attempts_ip: int = int(os.getenv("LOGIN_RATE_LIMIT_MAX_IP", "5"))
    login_email_window_ms: int = int(os.getenv("LOGIN_RATE_LIMIT_EMAIL_WINDOW_MS", "3600000"))  # 1 hour
    login_max_attempts_email: int = int(os.getenv("LOGIN_RATE_LIMIT_MAX_EMAIL", "3"))


settings = Settings()  # Instantiate configuration
