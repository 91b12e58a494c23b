"""HTTP constants for the rest layer.

Centralizes media types, status messages and transport defaults.
"""

# Media types
MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_FORM = "application/x-www-form-urlencoded"
ACCEPT_CHARSET_UTF8 = "utf-8"

# Status classification messages
MESSAGE_ROUTE_NOT_FOUND = "request path does not exist, check the request address"
MESSAGE_CLIENT_ERROR = (
    "authentication failed, contact administrator, error code: {status}"
)
MESSAGE_SERVER_ERROR = (
    "internal server error, retry later or contact support, error code: {status}"
)
MESSAGE_UNKNOWN_ERROR = (
    "unknown error, retry later or contact administrator, error code: {status}"
)

# Transport defaults
DEFAULT_READ_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_KEEPALIVE_EXPIRY_SECONDS = 60.0
DEFAULT_MAX_RESPONSE_SIZE_BYTES = 5 * 1024 * 1024  # 5 MB
DEFAULT_CHUNK_SIZE = 8192
REQUEST_TIME_HEADER = "x-inside-request-time"

# Form values that are sequences are joined with this separator
FORM_VALUE_SEPARATOR = ","
