"""Example: drive the service layer without Flask.

Controllers stay thin; everything below is what the HTTP routes call.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from timeclock.common.datetime_utils import format_hours
from timeclock.container import build_container
from timeclock.core.rules import ClockRules


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, rules=ClockRules.from_settings(settings))

    # Login code of the seeded hourly employee.
    view = container.payroll_service.employee_current_period("1001")
    print(view.employee.full_name, view.pay_period.to_dict() if view.pay_period else None)
    for number, week in enumerate(view.totals, start=1):
        print(f"week {number}: {format_hours(week.duration) or '00:00'} (overtime {format_hours(week.overtime) or '00:00'})")


if __name__ == "__main__":
    main()
