import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
PRELOAD_MODELS = False

FACE_MATCH_THRESHOLD = 0.5
WORKDAY_START = "08:00"
LATE_CUTOFF = "08:15"
NON_WORKING_WEEKDAYS = "5,6"

SCHEDULER_ENABLED = False
RECONCILE_AT = "23:59"
RECONCILE_CLOSE_MODE = "run_time"
FACILITY_CLOSING_TIME = "18:00"

VERIFICATION_WORKERS = 1

TELEGRAM_BOT_TOKEN = None
TELEGRAM_CHAT_ID = None
NOTIFY_TIMEOUT_SECONDS = 1.0
