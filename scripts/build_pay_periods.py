"""Extend the pay period calendar through the end of the current year.

Meant for a yearly cron job; safe to run more than once.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from timeclock.container import build_container
from timeclock.core.rules import ClockRules


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), rules=ClockRules.from_settings(settings))
    created = container.pay_period_service.generate_upcoming()
    if not created:
        print("OK: no pay periods created")
        return
    print(f"OK: created {len(created)} pay periods ({created[0].start_date:%Y-%m-%d} .. {created[-1].end_date:%Y-%m-%d})")


if __name__ == "__main__":
    main()
