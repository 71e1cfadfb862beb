"""Time utilities for timezone-aware datetime handling."""

from datetime import datetime, timezone
from typing import Optional
import pytz


DAY_SECONDS = 24 * 60 * 60


def utcnow() -> datetime:
    """取得當前 UTC 時間 (tz-aware)"""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    轉換時間為 UTC tz-aware datetime

    Args:
        dt: 輸入時間
        tz_name: 原時區名稱 (若 dt 為 naive)

    Returns:
        UTC tz-aware datetime
    """
    if dt.tzinfo is None:
        # Naive datetime，需要指定時區
        if tz_name:
            tz = pytz.timezone(tz_name)
            dt = tz.localize(dt)
        else:
            # 假設為 UTC
            dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso8601(date_str: str) -> datetime:
    """解析 ISO8601 字串為 tz-aware datetime"""
    dt = datetime.fromisoformat(date_str.replace('Z', '+00:00'))
    return to_utc(dt)


def age_days(then: datetime, now: datetime) -> float:
    """
    計算 then 距離 now 的天數 (可為負，代表未來時間)

    Args:
        then: 事件時間
        now: 當前時間

    Returns:
        天數 (float)
    """
    delta = to_utc(now) - to_utc(then)
    return delta.total_seconds() / DAY_SECONDS
