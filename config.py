import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./monetization.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Payment gateway: "simulated" or "http"
    PAYMENT_GATEWAY = data.get("PAYMENT_GATEWAY", "simulated")
    PAYMENT_GATEWAY_URL = data.get("PAYMENT_GATEWAY_URL", None)
    PAYMENT_SUCCESS_RATE = float(data.get("PAYMENT_SUCCESS_RATE", 0.9))
    PAYMENT_TIMEOUT_SECONDS = float(data.get("PAYMENT_TIMEOUT_SECONDS", 10.0))

    # Loyalty rewards
    REWARD_RATE = str(data.get("REWARD_RATE", "0.05"))  # Units per currency unit, floored
    REWARD_WEBHOOK_URL = data.get("REWARD_WEBHOOK_URL", None)

    # Side-effect retry worker
    SIDE_EFFECT_RETRY_ENABLED = bool(data.get("SIDE_EFFECT_RETRY_ENABLED", True))
    SIDE_EFFECT_RETRY_INTERVAL_SECONDS = data.get("SIDE_EFFECT_RETRY_INTERVAL_SECONDS", 300)
    SIDE_EFFECT_GRACE_SECONDS = data.get("SIDE_EFFECT_GRACE_SECONDS", 60)  # Age before a PENDING log is retried
    SIDE_EFFECT_MAX_ATTEMPTS = data.get("SIDE_EFFECT_MAX_ATTEMPTS", 5)
