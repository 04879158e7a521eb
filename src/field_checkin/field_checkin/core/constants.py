"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_KM = 6371.0
DISTANCE_DECIMALS = 2

DEFAULT_WARNING_THRESHOLD_METERS = 500
FAR_FROM_CLIENT_MESSAGE = "You are far from the client location"

DEFAULT_HISTORY_LIMIT = 50
