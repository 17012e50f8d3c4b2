import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "Majestic Haven")
    # Core settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-me")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # Session (flash messages only; there are no accounts)
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "majestic_haven_session")
    SESSION_MAX_AGE_DAYS: int = int(os.getenv("SESSION_MAX_AGE_DAYS", "1"))

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./majestic_haven.db")
    AUTO_CREATE_SCHEMA: bool = os.getenv("AUTO_CREATE_SCHEMA", "true").lower() == "true"
    SEED_SAMPLE_ROOMS: bool = os.getenv("SEED_SAMPLE_ROOMS", "false").lower() == "true"

    # Catalogue & bookings
    CURRENCY: str = os.getenv("CURRENCY", "USD").upper()
    FEATURED_ROOMS: int = int(os.getenv("FEATURED_ROOMS", "3"))
    AUTO_COMPLETE_ENABLED: bool = os.getenv("AUTO_COMPLETE_ENABLED", "true").lower() == "true"

    # Administrative JSON endpoints (room catalogue, booking updates)
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

    # Mail Settings (Mailgun)
    MAIL_FROM: str = os.getenv("MAIL_FROM", "reservations@majestichaven.example")
    MAILGUN_API_KEY: str = os.getenv("MAILGUN_API_KEY", "")
    MAILGUN_DOMAIN: str = os.getenv("MAILGUN_DOMAIN", "")

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    RATE_LIMIT_BOOKING: str = os.getenv("RATE_LIMIT_BOOKING", "10/minute")

settings = Settings()
