# backend/config.py
import os
from datetime import timedelta

class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost/ironlog"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # store calls must fail fast instead of hanging a request
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_timeout": int(os.environ.get("DB_POOL_TIMEOUT", "10")),
    }

    # 🔐 JWT config
    JWT_TOKEN_LOCATION = ["headers"]     # where to look for tokens
    JWT_HEADER_NAME = "Authorization"    # header name
    JWT_HEADER_TYPE = "Bearer"           # expected prefix
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)  # dev: 7 days

    # 🏋️ analytics policy
    ANALYTICS_DEFAULT_BODY_WEIGHT_KG = float(
        os.environ.get("ANALYTICS_DEFAULT_BODY_WEIGHT_KG", "75.0")
    )
    ANALYTICS_DEFAULT_DURATION_MINUTES = float(
        os.environ.get("ANALYTICS_DEFAULT_DURATION_MINUTES", "60.0")
    )
    ANALYTICS_ACTIVITY_LOOKBACK_DAYS = 365
    ANALYTICS_LEADERBOARD_LIMIT = 10
    ANALYTICS_REP_PR_MIN_REPS = 5


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
