import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DATA_DIR = os.getenv("DATA_DIR", str(BASE_DIR / "database"))
BACKUP_DIR = os.getenv("BACKUP_DIR", str(BASE_DIR / "backups"))

# Headcount the attendance rate is measured against
EXPECTED_USER_COUNT = int(os.getenv("EXPECTED_USER_COUNT", "10"))
ANALYTICS_CACHE_TTL_SECONDS = int(os.getenv("ANALYTICS_CACHE_TTL_SECONDS", "300"))
ANOMALY_THRESHOLD_HOURS = float(os.getenv("ANOMALY_THRESHOLD_HOURS", "3"))
MAX_BACKUPS = int(os.getenv("MAX_BACKUPS", "24"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Create missing collection files on startup
AUTO_INIT_DATA = bool(int(os.getenv("AUTO_INIT_DATA", "1")))
# Optional: also seed demo users
AUTO_SEED_DATA = bool(int(os.getenv("AUTO_SEED_DATA", "1")))
