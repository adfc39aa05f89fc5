import os
from pydantic_settings import BaseSettings, SettingsConfigDict

# Calculate project root (assuming this file is in core/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENV_FILE = os.path.join(BASE_DIR, ".env")

class Settings(BaseSettings):
    # SwitchBot API
    SWITCHBOT_TOKEN: str = ""
    SWITCHBOT_SECRET: str = ""
    SWITCHBOT_API_URL: str = "https://api.switch-bot.com"
    SWITCHBOT_NONCE: str = "requestID"

    # Webex incoming webhook
    WEBEX_WEBHOOK_URL: str = ""

    # Polling mode
    DEVICE_ID: str = ""
    DEVICE_NAME: str = "Hub 2"
    TEMP_THRESHOLD: float = 10.0
    POLL_INTERVAL_MS: int = 60000
    POLL_INITIAL_DELAY_MS: int = 10000

    # Webhook mode: externally reachable address of this server
    BASE_URL: str = ""

    # Feature Flags
    ENABLE_POLLER: bool = True

    HTTP_TIMEOUT: float = 10.0 # seconds, applied to every outbound call
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = os.path.join("logs", "switchbot.log")

    model_config = SettingsConfigDict(env_file=ENV_FILE, env_ignore_empty=True, extra="ignore")

settings = Settings()
