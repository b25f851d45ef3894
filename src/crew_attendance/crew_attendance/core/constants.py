"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SHIFT_ROLLOVER_HOUR = 22
MINUTES_PER_DAY = 1440
MEMBER_SEPARATOR = "、"
PIN_LENGTH = 4
