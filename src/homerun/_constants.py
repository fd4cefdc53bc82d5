"""Internal constants shared across the library."""

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"
ROUTES_FIELD_MASK = "routes.duration,routes.staticDuration,routes.distanceMeters"
USER_AGENT = "homerun/1 (+aiohttp)"

# Mean Earth radius used by the haversine distance, in meters.
EARTH_RADIUS_M = 6_371_000.0
WORK_RADIUS_METERS = 200.0

# Delay strictly greater than this is reported as traffic.
TRAFFIC_DELAY_THRESHOLD_MINUTES = 5

NO_ROUTE_MESSAGE = "Could not get route info."
NOTIFICATION_TITLE = "🏃 HomeRun"
NOTIFICATIONS_ENABLED_MESSAGE = "✅ Notifications enabled! You'll be alerted when there's traffic."

# ------------------------------------------------------------------
# Key-value storage keys
# ------------------------------------------------------------------

HOME_ADDRESS_KEY = "homeAddress"
WORK_ADDRESS_KEY = "workAddress"
WORK_COORDS_KEY = "workCoords"
