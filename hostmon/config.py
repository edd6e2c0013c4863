from __future__ import annotations

from pydantic_settings import BaseSettings

# External tools are killed and treated as unavailable after this many seconds.
TOOL_TIMEOUT_SECONDS = 5.0

# Probed in order; the first device reporting SMART support wins.
SMART_CANDIDATE_DEVICES: tuple[str, ...] = (
    "/dev/sda",
    "/dev/nvme0n1",
    "/dev/sdb",
    "/dev/nvme0",
)

WINDOWS_SYSTEM_VOLUME = "C:"

# smartctl output shorter than this carries no report.
MIN_SMART_OUTPUT = 10


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "Host Monitor"
    debug: bool = False

    # --- sources ---
    tool_timeout: float = TOOL_TIMEOUT_SECONDS
    smart_devices: list[str] = list(SMART_CANDIDATE_DEVICES)
    windows_volume: str = WINDOWS_SYSTEM_VOLUME

    # --- pollers (seconds between polls) ---
    identity_interval: float = 5.0
    cpu_interval: float = 1.0
    memory_interval: float = 1.0
    disk_interval: float = 5.0

    # --- server ---
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_prefix": "HOSTMON_"}


settings = Settings()
