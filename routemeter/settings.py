from pydantic_settings import BaseSettings, SettingsConfigDict

from routemeter import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "routemeter"
    APP_VERSION: str = __version__

    # Bind address for `python -m routemeter`
    HOST: str = "0.0.0.0"
    PORT: int = 9003

    # Logging
    LOG_LEVEL: str = "INFO"

    # When set, files under this directory are served at /static
    STATIC_DIR: str | None = None

    # WebSocket echo/chat: larger text frames close the socket with 1009 (message too big)
    CHAT_MAX_MESSAGE_BYTES: int = 4096


settings = Settings()
