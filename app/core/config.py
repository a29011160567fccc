"""Application configuration"""
import os
from dotenv import load_dotenv

load_dotenv()

INSECURE_DEFAULT_JWT_KEY = "your-super-secret-key-that-is-at-least-32-characters-long"


class Settings:
    # Database Configuration
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cardealership.db")
    DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    # Logging Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "app/logs")
    LOG_FILE_NAME = os.getenv("LOG_FILE_NAME", "operations.log")

    # Development/Production Settings
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Project Metadata
    PROJECT_NAME = "Car Dealership API"
    PROJECT_VERSION = "1.0.0"
    API_V1_STR = "/api/v1"

    # JWT Authentication
    # The fallback key is a known insecure default; startup logs a warning when it is in use.
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", INSECURE_DEFAULT_JWT_KEY)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "CarDealershipAPI")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "CarDealershipAPI")
    ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", 24))

    # Password hashing
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

    # OTP
    OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", 10))
    OTP_DELIVERY = os.getenv("OTP_DELIVERY", "console").lower()  # "console" or "smtp"
    OTP_CLEANUP_ENABLED = os.getenv("OTP_CLEANUP_ENABLED", "true").lower() == "true"
    OTP_CLEANUP_INTERVAL_MINUTES = int(os.getenv("OTP_CLEANUP_INTERVAL_MINUTES", 60))

    # SMTP / Email configuration
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER = os.getenv("SMTP_USER", "")
    SMTP_PASS = os.getenv("SMTP_PASS", "")
    EMAIL_FROM = os.getenv("EMAIL_FROM", "noreply@cardealership.com")

    # Seed data (Initial Setup)
    SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() == "true"
    SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@cardealership.com")
    SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "Admin123!")
    SEED_CUSTOMER_EMAIL = os.getenv("SEED_CUSTOMER_EMAIL", "john.doe@email.com")
    SEED_CUSTOMER_PASSWORD = os.getenv("SEED_CUSTOMER_PASSWORD", "Customer123!")

    @property
    def uses_insecure_jwt_key(self) -> bool:
        return self.JWT_SECRET_KEY == INSECURE_DEFAULT_JWT_KEY


settings = Settings()
