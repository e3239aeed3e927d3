"""Internal constants shared across the library."""

DEFAULT_BASE_URL = "http://localhost:8000"
USER_AGENT = "remotefetch/aiohttp"
AUTHORIZATION_HEADER = "Authorization"
DEFAULT_REQUEST_TIMEOUT: float = 30.0
