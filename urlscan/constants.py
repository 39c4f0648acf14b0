"""
urlscan API constants and client defaults.
"""

# =============================================================================
# Base URLs
# =============================================================================

DEFAULT_API_HOST = "urlscan.io"
DEFAULT_BASE_URL = f"https://{DEFAULT_API_HOST}"


# =============================================================================
# Client Defaults
# =============================================================================

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_CONNECT_TIMEOUT_MS = 10_000
DEFAULT_SOCKET_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 3
DEFAULT_FOLLOW_REDIRECTS = False
DEFAULT_ENABLE_LOGGING = False

DEFAULT_BASE_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 60_000
DEFAULT_JITTER_MS = 1000

# Responses slower than this are logged when logging is enabled
SLOW_RESPONSE_THRESHOLD_MS = 5000

CLIENT_VERSION = "1.0.0"
USER_AGENT = f"UrlScan-Python-Client/{CLIENT_VERSION} (aiohttp)"


# =============================================================================
# Headers
# =============================================================================

API_KEY_HEADER = "API-Key"
ACCEPT_JSON = "application/json"
CONTENT_TYPE_JSON = "application/json"


# =============================================================================
# Environment Variables
# =============================================================================

class ConfigKeys:
    """Environment variable names read by from_environment()."""

    API_KEY = "URLSCAN_API_KEY"
    BASE_URL = "URLSCAN_BASE_URL"
    TIMEOUT = "URLSCAN_TIMEOUT_MS"
    CONNECT_TIMEOUT = "URLSCAN_CONNECT_TIMEOUT_MS"
    SOCKET_TIMEOUT = "URLSCAN_SOCKET_TIMEOUT_MS"
    MAX_RETRIES = "URLSCAN_MAX_RETRIES"
    ENABLE_LOGGING = "URLSCAN_ENABLE_LOGGING"
    FOLLOW_REDIRECTS = "URLSCAN_FOLLOW_REDIRECTS"


# =============================================================================
# Endpoints
# =============================================================================

class Endpoints:
    """API paths, relative to the base URL."""

    QUOTAS = "/api/v1/quotas"
    PRO_USERNAME = "/api/v1/pro/username"

    SCAN = "/api/v1/scan"
    RESULT = "/api/v1/result/{scan_id}/"
    SCREENSHOT = "/screenshots/{scan_id}.png"
    DOM = "/dom/{scan_id}/"
    AVAILABLE_COUNTRIES = "/api/v1/availableCountries"
    USER_AGENTS = "/api/v1/userAgents"

    SEARCH = "/api/v1/search"
    SIMILAR_SCANS = "/api/v1/pro/result/{scan_id}/similar/"

    HOSTNAME = "/api/v1/hostname/{hostname}"

    AVAILABLE_BRANDS = "/api/v1/pro/availableBrands"
    BRANDS = "/api/v1/pro/brands"

    DOWNLOAD = "/downloads/{file_hash}"

    SAVED_SEARCHES = "/api/v1/user/searches/"
    SAVED_SEARCH = "/api/v1/user/searches/{search_id}/"
    SAVED_SEARCH_RESULTS = "/api/v1/user/searches/{search_id}/results/"

    SUBSCRIPTIONS = "/api/v1/user/subscriptions/"
    SUBSCRIPTION = "/api/v1/user/subscriptions/{subscription_id}/"
    SUBSCRIPTION_RESULTS = "/api/v1/user/subscriptions/{subscription_id}/results/{datasource}/"

    INCIDENTS = "/api/v1/user/incidents"
    INCIDENT = "/api/v1/user/incidents/{incident_id}"
    INCIDENT_ACTION = "/api/v1/user/incidents/{incident_id}/{action}"
    WATCHABLE_ATTRIBUTES = "/api/v1/user/watchableAttributes"
    INCIDENT_STATES = "/api/v1/user/incidentstates/{incident_id}/"

    CHANNELS = "/api/v1/user/channels/"
    CHANNEL = "/api/v1/user/channels/{channel_id}"

    LIVESCAN_SCANNERS = "/api/v1/livescan/scanners/"
    LIVESCAN_TASK = "/api/v1/livescan/{scanner_id}/task/"
    LIVESCAN_SCAN = "/api/v1/livescan/{scanner_id}/scan/"
    LIVESCAN_RESOURCE = "/api/v1/livescan/{scanner_id}/{resource_type}/{resource_id}"
    LIVESCAN_STORED = "/api/v1/livescan/{scanner_id}/{scan_id}/"
