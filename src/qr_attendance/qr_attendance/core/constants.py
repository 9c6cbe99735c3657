"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_SECONDS = 300
PROXIMITY_THRESHOLD_METERS = 100.0
EARTH_RADIUS_KM = 6371.0

# 16 bytes = 128 bits of randomness per token.
TOKEN_BYTES = 16
SESSION_ID_PREFIX = "sess"

COUNTDOWN_WARNING_SECONDS = 60
COUNTDOWN_CRITICAL_SECONDS = 30
COUNTDOWN_CADENCE_SECONDS = 1
