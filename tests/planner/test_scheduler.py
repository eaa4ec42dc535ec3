"""截止日期推算单元测试"""

from datetime import date, timedelta

import pytest
from peezy.planner.scheduler import schedule_due_date, whole_days_between

TODAY = date(2025, 1, 1)
MOVE = date(2025, 1, 31)


class TestScheduleDueDate:
    """紧急度插值与上下界"""

    def test_urgency_100_is_today(self):
        """紧急度 100 当天到期"""
        assert schedule_due_date(TODAY, MOVE, 100) == date(2025, 1, 1)

    def test_urgency_0_is_move_date(self):
        """紧急度 0 搬家当天到期"""
        assert schedule_due_date(TODAY, MOVE, 0) == date(2025, 1, 31)

    def test_urgency_50_is_midpoint(self):
        """紧急度 50：30 天的一半"""
        assert schedule_due_date(TODAY, MOVE, 50) == date(2025, 1, 16)

    def test_floor_rounding(self):
        """不足一天向下取整"""
        # 30 * 0.33 = 9.9 -> 9
        assert schedule_due_date(TODAY, MOVE, 67) == date(2025, 1, 10)

    def test_latest_bound_lowers_due_date(self):
        """latest 上界：搬家前 5 天"""
        assert schedule_due_date(TODAY, MOVE, 0, latest_days_before_move=5) == date(2025, 1, 26)

    def test_earliest_bound_raises_due_date(self):
        """earliest 下界：不早于搬家前 10 天"""
        assert schedule_due_date(TODAY, MOVE, 100, earliest_days_before_move=10) == date(2025, 1, 21)

    def test_past_earliest_bound_is_ignored(self):
        """已过去的 earliest 下界不生效"""
        assert schedule_due_date(TODAY, MOVE, 100, earliest_days_before_move=60) == TODAY

    def test_latest_wins_over_inconsistent_earliest(self):
        """earliest 晚于 latest 时以 latest 为准"""
        due = schedule_due_date(
            TODAY, MOVE, 100, earliest_days_before_move=5, latest_days_before_move=20
        )
        assert due == date(2025, 1, 11)

    def test_past_latest_bound_clamps_to_today(self):
        """已过去的 latest 上界兜底到今天"""
        assert schedule_due_date(TODAY, MOVE, 0, latest_days_before_move=45) == TODAY

    @pytest.mark.parametrize("move", [TODAY, TODAY - timedelta(days=400)])
    def test_move_today_or_past(self, move):
        """搬家日已到或已过：当天到期"""
        assert schedule_due_date(TODAY, move, 0, 5, 10) == TODAY

    def test_never_before_today(self):
        """任何紧急度和上下界组合都不早于今天"""
        for urgency in range(0, 101, 5):
            for earliest in (None, 0, 15, 40):
                for latest in (None, 0, 15, 40):
                    due = schedule_due_date(TODAY, MOVE, urgency, earliest, latest)
                    assert due >= TODAY

    def test_pure(self):
        """相同输入相同输出"""
        first = schedule_due_date(TODAY, MOVE, 37, 20, 3)
        assert schedule_due_date(TODAY, MOVE, 37, 20, 3) == first

    def test_whole_days_between(self):
        """整天差，可为负"""
        assert whole_days_between(TODAY, MOVE) == 30
        assert whole_days_between(MOVE, TODAY) == -30
