import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "family_care"),
    "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Create the sample staff accounts when the staff table is empty
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
OBJECT_DIR = os.getenv("OBJECT_DIR", "objects")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
