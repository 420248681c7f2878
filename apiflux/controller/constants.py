"""Constants for the request controller."""

# HTTP status ranges
HTTP_STATUS_INFORMATIONAL_MIN = 100
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300  # exclusive
HTTP_STATUS_REDIRECT_MAX = 400  # exclusive
HTTP_STATUS_CLIENT_ERROR_MAX = 500  # exclusive
HTTP_STATUS_SERVER_ERROR_MAX = 600  # exclusive

# Status reported in logs when there is no real response (mock path)
MOCK_LOG_STATUS = 200

# Timing defaults
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_RETRY_BACKOFF_SECONDS = 1.0
DEFAULT_PREVIEW_DELAY_SECONDS = 1.0

# Logging
DEFAULT_MAX_LOGGED_BODY_CHARS = 4000
LOG_CHANNEL_THREAD_PREFIX = "apiflux-log"

DEFAULT_USER_AGENT = "apiflux/0.1"
