# Service configuration. Every value can be overridden from the environment.
import os


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


# Sliding window
WINDOW_SIZE = int(os.getenv("WINDOW_SIZE", 10))

# Upstream number API
NUMBER_API_BASE_URL = os.getenv("NUMBER_API_BASE_URL", "http://20.244.56.144/evaluation-service")
NUMBER_CATEGORIES = {
    "p": "primes",
    "f": "fibo",
    "e": "even",
    "r": "rand",
}
AUTH_URL = os.getenv("AUTH_URL", NUMBER_API_BASE_URL + "/auth")
CLIENT_ID = os.getenv("CLIENT_ID", "")
CLIENT_SECRET = os.getenv("CLIENT_SECRET", "")
ACCESS_TOKEN = os.getenv("ACCESS_TOKEN", "")
NUMBER_API_TIMEOUT_MS = int(os.getenv("NUMBER_API_TIMEOUT_MS", 500))  # upstream answers slower than this are dropped

# Servers
API_HOST = os.getenv("API_HOST", "0.0.0.0")
NUMBER_API_PORT = int(os.getenv("NUMBER_API_PORT", 3000))
STOCK_API_PORT = int(os.getenv("STOCK_API_PORT", os.getenv("PORT", 3000)))
ENABLE_CORS = _env_flag("ENABLE_CORS", "True")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()  # e.g. "DEBUG", "INFO", "WARNING", "ERROR"


def number_urls(base_url: str = None) -> dict:
    """Map each category id to its upstream endpoint."""
    base = (base_url or NUMBER_API_BASE_URL).rstrip("/")
    return {key: f"{base}/{path}" for key, path in NUMBER_CATEGORIES.items()}
