# config.py
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///marketplace.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JSON_AS_ASCII = False
    SECRET_KEY = os.getenv("FLASK_SECRET", "marketplace-dev-secret")

    # Bearer tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "devsecret")
    JWT_ALGO = os.getenv("JWT_ALGO", "HS256")
    TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "6"))

    # Market price = seller price * (1 + MARKUP_RATE) + FLAT_FEE
    MARKUP_RATE = float(os.getenv("MARKUP_RATE", "0.10"))
    FLAT_FEE = float(os.getenv("FLAT_FEE", "20"))
    MAX_PHOTOS = int(os.getenv("MAX_PHOTOS", "5"))

    # Bootstrap admin
    ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
