"""时钟单元测试"""

from datetime import UTC, date, datetime

from peezy.planner.clock import FixedClock, SystemClock


class TestFixedClock:
    """可控时钟"""

    def test_now_is_midnight_utc(self):
        clock = FixedClock(date(2025, 1, 1))
        assert clock.now() == datetime(2025, 1, 1, tzinfo=UTC)

    def test_tick_keeps_date(self):
        """tick 只推进时间戳"""
        clock = FixedClock(date(2025, 1, 1))
        clock.tick(90)
        assert clock.now() == datetime(2025, 1, 1, 0, 1, 30, tzinfo=UTC)
        assert clock.today() == date(2025, 1, 1)

    def test_advance_days(self):
        """前进与后退"""
        clock = FixedClock(date(2025, 1, 1))
        clock.advance_days(3)
        assert clock.today() == date(2025, 1, 4)
        clock.advance_days(-10)
        assert clock.today() == date(2024, 12, 25)

    def test_set_days_until(self):
        """设置为距搬家还有 N 天"""
        clock = FixedClock(date(2025, 1, 1))
        clock.set_days_until(7, date(2025, 3, 1))
        assert clock.today() == date(2025, 2, 22)


class TestSystemClock:
    """系统时钟"""

    def test_utc(self):
        now = SystemClock().now()
        assert now.tzinfo is UTC
