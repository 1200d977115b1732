"""Server configuration loaded from environment variables."""
from typing import Literal

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BIND_HOST = "0.0.0.0"


class Settings(BaseSettings):
    """Server configuration loaded from environment variables.

    Attributes:
        host: Hostname advertised in generated menu lines.
        port: Port advertised in generated menu lines.
        bind_raw: Raw ``host:port`` address to listen on.
        root: Directory served to clients.
        max_workers: Maximum number of connections handled at once.
        shutdown_timeout: Seconds to wait for in-flight handlers on exit.
        debug: Enable debug-level logging.
        log_format: Console output for humans or JSON lines for collectors.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOPHERD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 7070
    bind_raw: str = ""
    root: str = "."
    max_workers: int = 10
    shutdown_timeout: float = 5.0
    debug: bool = False
    log_format: Literal["console", "json"] = "console"

    @field_validator("port")
    @classmethod
    def check_port(cls, value: int) -> int:
        """Reject ports outside the TCP range."""
        if not 0 < value < 65536:
            raise ValueError(f"port out of range: {value}")
        return value

    @field_validator("max_workers")
    @classmethod
    def check_max_workers(cls, value: int) -> int:
        """Require at least one worker."""
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value

    @field_validator("bind_raw")
    @classmethod
    def check_bind(cls, value: str) -> str:
        """Require a numeric port when ``bind_raw`` names one."""
        _, sep, port = value.strip().rpartition(":")
        if sep and not port.isdigit():
            raise ValueError(f"invalid bind address: {value}")
        return value

    @computed_field
    @property
    def bind_address(self) -> tuple[str, int]:
        """Parse the listen address from ``bind_raw``.

        An empty value listens on all interfaces at ``port``. A value
        without a port listens on that interface at ``port``.

        Returns:
            Tuple of (interface, port) suitable for ``socket.bind``.
        """
        raw = self.bind_raw.strip()
        if not raw:
            return DEFAULT_BIND_HOST, self.port
        interface, sep, port = raw.rpartition(":")
        if not sep:
            return raw, self.port
        return interface or DEFAULT_BIND_HOST, int(port)
