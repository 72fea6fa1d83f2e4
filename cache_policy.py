from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from source_config import SourceConfig

NO_STORE = "no-cache, no-store, must-revalidate"


def local_now(tz_name: str | None = None) -> datetime:
    if tz_name:
        return datetime.now(ZoneInfo(tz_name))
    return datetime.now().astimezone()


def seconds_until_refresh(
    now: datetime,
    hour: int = 7,
    minimum: int = 60,
    maximum: int | None = 86400,
) -> int:
    """Seconds from ``now`` until the next ``hour``:00 on the same wall clock."""
    target = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    if now >= target:
        target = target + timedelta(days=1)
    seconds = int((target - now).total_seconds())
    if maximum is not None:
        seconds = min(seconds, maximum)
    return max(minimum, seconds)


def cache_control_header(config: SourceConfig, force_refresh: bool = False, now: datetime | None = None) -> str:
    if force_refresh:
        return NO_STORE
    current = now or local_now(config.timezone)
    max_age = seconds_until_refresh(
        current,
        hour=config.refresh_hour,
        minimum=config.cache_min_seconds,
        maximum=config.cache_max_seconds,
    )
    return f"s-maxage={max_age}, stale-while-revalidate={config.stale_while_revalidate}"
