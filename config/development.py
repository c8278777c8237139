import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
PRELOAD_MODELS = bool(int(os.getenv("PRELOAD_MODELS", "1")))

# Facility policy
FACE_MATCH_THRESHOLD = float(os.getenv("FACE_MATCH_THRESHOLD", "0.5"))
WORKDAY_START = os.getenv("WORKDAY_START", "08:00")
LATE_CUTOFF = os.getenv("LATE_CUTOFF", "08:15")
NON_WORKING_WEEKDAYS = os.getenv("NON_WORKING_WEEKDAYS", "5,6")

# Daily reconciliation of sessions left open
SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
RECONCILE_AT = os.getenv("RECONCILE_AT", "23:59")
RECONCILE_CLOSE_MODE = os.getenv("RECONCILE_CLOSE_MODE", "run_time")
FACILITY_CLOSING_TIME = os.getenv("FACILITY_CLOSING_TIME", "18:00")

VERIFICATION_WORKERS = int(os.getenv("VERIFICATION_WORKERS", "3"))

# Telegram notifications are disabled unless both values are set
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID")
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5"))
