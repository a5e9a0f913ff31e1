import os
from dataclasses import dataclass


def _env(*names: str) -> str:
    """Return the first non-empty variable among ``names``."""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def _env_int(*names: str, default: int | None = None) -> int | None:
    value = _env(*names)
    try:
        return int(value) if value else default
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    value = _env(name).lower()
    if not value:
        return default
    return value in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    token: str
    request_channel_id: int | None = None
    log_channel_id: int | None = None
    role_id: int | None = None
    command_role_id: int | None = None
    cooldown_seconds: float = 300.0
    name_max_length: int = 32
    # Shorten names so "Name | ID" fits Discord's 32 character nickname limit
    fit_nickname: bool = False
    similar_name_window: float = 24 * 60 * 60
    data_path: str = "rolecall_data.json"


def load_settings() -> Settings:
    cooldown_ms = _env_int("NAME_CHANGE_COOLDOWN", default=300_000)
    return Settings(
        token=_env("TOKEN", "DISCORD_BOT_TOKEN"),
        request_channel_id=_env_int("ROLE_REQUEST_CHANNEL_ID", "ROLE_REQUEST_CHANNEL"),
        log_channel_id=_env_int(
            "LOG_CHANNEL_ID", "LOG_CHANNEL", "NAME_CHANGE_OUTPUT_CHANNEL_ID"
        ),
        role_id=_env_int("TARGET_ROLE_ID", "SLAYER_ROLE_ID"),
        command_role_id=_env_int("HIGH_COMMAND_ROLE_ID"),
        cooldown_seconds=max(0, cooldown_ms) / 1000,
        name_max_length=_env_int("NAME_MAX_LENGTH", default=32),
        fit_nickname=_env_bool("FIT_NICKNAME"),
        similar_name_window=float(_env_int("SIMILAR_NAME_WINDOW", default=86400)),
        data_path=_env("DATA_PATH") or "rolecall_data.json",
    )
