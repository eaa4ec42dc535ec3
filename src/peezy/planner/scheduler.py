"""截止日期推算

紧急度表示"在规划窗口内多早完成"：
- 100 = 立即处理（今天）
- 0 = 可以等到搬家当天

daysFromNow = floor(totalDays * (1 - urgency / 100))，再依次应用
earliest 下界、latest 上界，最后兜底不早于今天。
earliest 晚于 latest 的异常条目不做纠正：latest 后应用，以 latest 为准。
"""

from datetime import date, timedelta


def whole_days_between(start: date, end: date) -> int:
    """start 到 end 的整天数（end 早于 start 时为负）"""
    return (end - start).days


def schedule_due_date(
    today: date,
    move_date: date,
    urgency_percentage: int,
    earliest_days_before_move: int | None = None,
    latest_days_before_move: int | None = None,
) -> date:
    """计算任务截止日期

    Args:
        today: 当前日期（由注入的时钟提供）
        move_date: 搬家日期
        urgency_percentage: 紧急度 0-100
        earliest_days_before_move: 最早在搬家前多少天（可选）
        latest_days_before_move: 最晚在搬家前多少天（可选）

    Returns:
        截止日期，永远不早于 today
    """
    total_days = whole_days_between(today, move_date)
    if total_days <= 0:
        return today

    # 整数运算，避免浮点误差；total_days > 0 时 floor 与截断一致
    days_from_now = (total_days * (100 - urgency_percentage)) // 100
    due_date = today + timedelta(days=days_from_now)

    if earliest_days_before_move is not None:
        earliest_date = move_date - timedelta(days=earliest_days_before_move)
        # 已过去的下界无法执行，忽略
        if due_date < earliest_date and earliest_date > today:
            due_date = earliest_date

    if latest_days_before_move is not None:
        latest_date = move_date - timedelta(days=latest_days_before_move)
        if due_date > latest_date:
            due_date = latest_date

    if due_date < today:
        due_date = today

    return due_date
