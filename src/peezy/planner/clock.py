"""时钟抽象 -- 规划引擎不直接读取系统时间

生产环境使用 SystemClock；测试和调试使用 FixedClock，
支持按天前进/后退，或设置为"距搬家还有 N 天"。
"""

from datetime import UTC, date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """时钟接口"""

    def today(self) -> date:
        """当前日期（截止日期推算的基准）"""
        ...

    def now(self) -> datetime:
        """当前时间戳（created_at / updated_at）"""
        ...


class SystemClock:
    """系统时钟（UTC）"""

    def today(self) -> date:
        return self.now().date()

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """可控时钟 -- 测试与调试用

    now() 返回固定日期当天的 00:00 UTC，加上通过 tick() 累积的偏移。
    """

    def __init__(self, today: date) -> None:
        self._today = today
        self._offset = timedelta()

    def today(self) -> date:
        return self._today

    def now(self) -> datetime:
        start = datetime(self._today.year, self._today.month, self._today.day, tzinfo=UTC)
        return start + self._offset

    def tick(self, seconds: float = 1.0) -> None:
        """推进时间戳（不改变日期基准）"""
        self._offset += timedelta(seconds=seconds)

    def advance_days(self, days: int = 1) -> None:
        """前进 N 天（负数为后退）"""
        self._today = self._today + timedelta(days=days)

    def set_days_until(self, days_until: int, target: date) -> None:
        """设置为距 target 还有 days_until 天"""
        self._today = target - timedelta(days=days_until)
