"""Runtime settings for the ledger app.

Every value can be overridden from the environment so tests and local runs
can point the app at a scratch data directory.
"""
import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = Path(os.getenv("POCHE_DATA_DIR", _PROJECT_ROOT / "data"))

ENTRIES_KEY = os.getenv("POCHE_ENTRIES_KEY", "finance_app_step1_transactions_v1")
BUDGETS_KEY = os.getenv("POCHE_BUDGETS_KEY", "finance_app_step2_budgets_v1")

LOG_LEVEL = os.getenv("POCHE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

TOP_CATEGORY_LIMIT = 5
CHART_STEPS = 4


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole process."""
    name = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
