import os

from config import parse_csv_set

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_trends"),
}

# "mysql" or "memory" (process-local, data lost on restart)
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")
SCHOOL_ID = os.getenv("SCHOOL_ID", "default")

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", "86400"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Administrative roll-classes left out of the leaderboard (case-insensitive)
EXCLUDED_ROLL_CLASSES = parse_csv_set(os.getenv("EXCLUDED_ROLL_CLASSES", "staff,admin,office,left,unassigned"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
