import os
import tempfile

SECRET_KEY = "test-secret"

DATA_DIR = os.getenv("DATA_DIR", os.path.join(tempfile.gettempdir(), "attendance-tracker-test", "database"))
BACKUP_DIR = os.getenv("BACKUP_DIR", os.path.join(tempfile.gettempdir(), "attendance-tracker-test", "backups"))

EXPECTED_USER_COUNT = 10
ANALYTICS_CACHE_TTL_SECONDS = 300
ANOMALY_THRESHOLD_HOURS = 3
MAX_BACKUPS = 24

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DATA = True
AUTO_SEED_DATA = True
