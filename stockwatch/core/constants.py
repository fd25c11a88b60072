from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = PACKAGE_DIR.parent

STATUS_GOOD = "Good"
STATUS_LOW = "Low"
STATUS_CRITICAL = "Critical"
STOCK_STATUSES = (STATUS_GOOD, STATUS_LOW, STATUS_CRITICAL)

DEFAULT_LOW_STOCK_THRESHOLD = 10

NAME_MAX_LENGTH = 100
QUANTITY_MAX = 999_999
THRESHOLD_MAX = 9_999

SMS_SEGMENT_LENGTH = 160
