import os
from dotenv import load_dotenv

# Load variables from .env into environment
load_dotenv()


class ConfigurationError(RuntimeError):
    pass


# =========================
# NOTION CONFIG
# =========================
NOTION_API_KEY = os.getenv("NOTION_API_KEY")
NOTION_DATABASE_ID = os.getenv("NOTION_DATABASE_ID")
NOTION_REPORT_DATABASE_ID = os.getenv("NOTION_REPORT_DATABASE_ID")
NOTION_BASE_URL = os.getenv("NOTION_BASE_URL", "https://api.notion.com/v1")
NOTION_VERSION = os.getenv("NOTION_VERSION", "2022-06-28")

# =========================
# SCHEDULER CONFIG
# =========================
CRON_SCHEDULE = os.getenv("CRON_SCHEDULE", "30 17 * * *")  # weekdays filtered at run time
CRON_TIMEZONE = os.getenv("CRON_TIMEZONE", "Asia/Seoul")

# =========================
# REPORT CONFIG
# =========================
MEMBERS_FILE = os.getenv("MEMBERS_FILE", "members.json")
REPORT_TEAM_NAME = os.getenv("REPORT_TEAM_NAME", "큐브 파트")
EFFORT_PROPERTY = os.getenv("EFFORT_PROPERTY", "ManHour")
EFFORT_UNIT = os.getenv("EFFORT_UNIT", "m/h")
DAILY_WORK_HOURS = float(os.getenv("DAILY_WORK_HOURS", "8"))


# =========================
# VALIDATION (FAIL FAST)
# =========================
def validate():
    """Raise ConfigurationError naming every missing required variable."""
    missing = []

    if not NOTION_API_KEY:
        missing.append("NOTION_API_KEY")

    if not NOTION_DATABASE_ID:
        missing.append("NOTION_DATABASE_ID")

    if not NOTION_REPORT_DATABASE_ID:
        missing.append("NOTION_REPORT_DATABASE_ID")

    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
