import os

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value):
    return str(value).lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///studyhabits.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev_jwt_secret")
    JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", 24 * 7))

    AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "studyhabits_token")
    COOKIE_SECURE = _as_bool(os.getenv("COOKIE_SECURE", "false"))

    # Comma separated list of allowed frontend origins
    FRONTEND_URLS = [
        origin.strip()
        for origin in os.getenv("FRONTEND_URL", "http://localhost:5173,http://localhost:5175").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
