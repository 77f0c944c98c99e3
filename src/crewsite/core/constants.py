"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0
DEFAULT_RADIUS_METERS = 200.0

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

SECONDS_PER_HOUR = 3600
MONEY_PLACES = 2
DEFAULT_HISTORY_DAYS = 14
