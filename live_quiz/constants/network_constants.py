"""Network configuration constants for the quiz server."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 5000
API_PREFIX: str = "/api"
JOIN_PATH_TEMPLATE: str = "/participant/{quiz_id}"
QR_CODE_SCALE: int = 8
QR_CODE_BORDER: int = 2
