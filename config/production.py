import os

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY must be set in production")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "whistle_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

MAX_SHIFT_HOURS = int(os.getenv("MAX_SHIFT_HOURS", "15"))
BLACKOUT_ENABLED = bool(int(os.getenv("BLACKOUT_ENABLED", "1")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "30"))
# HTTPS only
SESSION_COOKIE_SECURE = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
