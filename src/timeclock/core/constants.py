"""Messages and defaults.

Note: thresholds live in ``rules.ClockRules``; only fixed strings belong here.
"""

WARNING_CLOCKED_IN = "Currently clocked in or missing previous clock out action"
WARNING_CLOCKED_OUT = "Currently clocked out or missing previous clock in action"
WARNING_ENTRY_NOT_FOUND = "Entry not found."
WARNING_CLOCK_ENTRY_NOT_FOUND = "Clock entry not found"

ERROR_INVALID_LOGIN = "Invalid Login Code"
ERROR_NOT_CLOCKED_IN = "Clock out failed. You are not clocked in."

ERROR_MISSING_ALL_ACTIONS = "This entry is missing all clock in and clock out entries"
ERROR_MISSING_CLOCK_IN = "This entry is missing a clock in action"
ERROR_MISSING_CLOCK_OUT = "This entry is missing a clock out action"

AUTO_ENTRY_NOTE = "Auto-Generated"
NOTE_SEPARATOR = ";"

DEFAULT_API_USER_ID = 0
