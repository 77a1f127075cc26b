import os

from config import parse_csv_set

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_trends_test"),
}

STORE_BACKEND = "memory"
SCHOOL_ID = "test-school"

TOKEN_MAX_AGE_SECONDS = 3600
MAX_UPLOAD_BYTES = 1024 * 1024

EXCLUDED_ROLL_CLASSES = parse_csv_set("staff,admin,office,left,unassigned")

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
