import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# In-memory by default; nothing is expected to survive a restart
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Business hours, whole hours on a 24h clock. The last slot ends at WORK_END.
WORK_START = int(os.getenv("WORK_START", "9"))
WORK_END = int(os.getenv("WORK_END", "18"))
SLOT_MINUTES = 60

SLOT_HORIZON_DAYS = int(os.getenv("SLOT_HORIZON_DAYS", "30"))

# datetime.weekday() numbering: Monday is 0, Sunday is 6
CLOSED_WEEKDAY = int(os.getenv("CLOSED_WEEKDAY", "6"))

# Chance that a freshly generated slot starts out open
SLOT_OPEN_PROBABILITY = float(os.getenv("SLOT_OPEN_PROBABILITY", "0.7"))
SLOT_SEED = int(os.getenv("SLOT_SEED")) if os.getenv("SLOT_SEED") else None

SEED_DEMO_APPOINTMENTS = os.getenv("SEED_DEMO_APPOINTMENTS", "true").lower() == "true"
