import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "whistle_db"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

MAX_SHIFT_HOURS = int(os.getenv("MAX_SHIFT_HOURS", "15"))
BLACKOUT_ENABLED = bool(int(os.getenv("BLACKOUT_ENABLED", "1")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "30"))
SESSION_COOKIE_SECURE = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
