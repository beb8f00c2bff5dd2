import os

SECRET_KEY = "test-secret"

LOCAL_STORE = "memory"
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
}

REMOTE_STORE = "memory"
REMOTE_STORE_URL = None
REMOTE_STORE_TOKEN = None

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_DIR = None

AUTO_INIT_DB = False
