from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

DEFAULT_BIND_ADDRESS = "127.0.0.1:8080"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    # host:port the HTTP server binds to
    BIND_ADDRESS: str = DEFAULT_BIND_ADDRESS
    MAX_EVENT_SIZE: int = 65536
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # slowapi limit string, applied per client address
    RATE_LIMIT: str = "12/minute"
    RATE_LIMIT_ENABLED: bool = True

    @field_validator("BIND_ADDRESS")
    @classmethod
    def _check_bind_address(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not host or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"expected host:port, got {value!r}")
        return value

    @property
    def bind_host(self) -> str:
        # uvicorn wants IPv6 hosts without brackets
        return self.BIND_ADDRESS.rpartition(":")[0].strip("[]")

    @property
    def bind_port(self) -> int:
        return int(self.BIND_ADDRESS.rpartition(":")[2])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
