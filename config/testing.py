import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

API_USER_ID = 0

STANDARD_WEEK_HOURS = 40
MISSING_CLOCK_MAX_HOURS = 16

AUTO_INIT_DB = False
AUTO_SEED_DB = False
