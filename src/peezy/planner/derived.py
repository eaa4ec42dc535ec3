"""派生条件字段

部分目录条件字段不是问卷直接收集的，而是由原始答案推导：
- hireMovers / hirePackers / hireCleaners：问卷保存描述性选项，目录条件只认 "Yes"/"No"
- moveDistance / isInterstate：由新旧地址的距离与州推导（地理编码由调用方完成）

推导可重复执行：已是 "Yes"/"No" 的值保持不变。
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from .config import LONG_DISTANCE_MILES
from .models.assessment import AssessmentResponse

LOCAL = "Local"
LONG_DISTANCE = "Long Distance"

# "Not Sure" 归为 Yes（宁可多准备）
SERVICE_YES_LABELS: dict[str, frozenset[str]] = {
    "hireMovers": frozenset({"yes", "hire professional movers", "get me quotes", "not sure"}),
    "hirePackers": frozenset({"yes", "hire professional packers", "get me quotes", "not sure"}),
    "hireCleaners": frozenset({"yes", "hire professional cleaners", "get me quotes", "not sure"}),
}


class MoveGeography(BaseModel):
    """地理编码结果（由调用方提供）"""

    distance_miles: float | None = Field(default=None, ge=0, description="新旧地址距离（英里）")
    from_state: str | None = Field(default=None, description="旧地址所在州")
    to_state: str | None = Field(default=None, description="新地址所在州")


def map_service_to_yes_no(label: str, yes_labels: frozenset[str]) -> str:
    """描述性服务选项映射为 Yes/No，空值保持为空"""
    if not label:
        return ""
    return "Yes" if label.strip().lower() in yes_labels else "No"


def classify_move(geography: MoveGeography) -> dict[str, str]:
    """推导 moveDistance 与 isInterstate

    信息不全时默认 Long Distance / Yes（宁可多准备）。
    """
    if geography.distance_miles is None:
        move_distance = LONG_DISTANCE
    elif geography.distance_miles >= LONG_DISTANCE_MILES:
        move_distance = LONG_DISTANCE
    else:
        move_distance = LOCAL

    from_state = (geography.from_state or "").strip().lower()
    to_state = (geography.to_state or "").strip().lower()
    if not from_state or not to_state:
        is_interstate = "Yes"
    else:
        is_interstate = "No" if from_state == to_state else "Yes"

    return {"moveDistance": move_distance, "isInterstate": is_interstate}


def derive_condition_fields(
    raw: Mapping[str, Any],
    geography: MoveGeography | None = None,
) -> AssessmentResponse:
    """在原始答案上补齐派生字段

    原始服务选项保留在 <key>Detail 字段中。

    Args:
        raw: 问卷原始答案
        geography: 地理编码结果；None 时不改动 moveDistance / isInterstate

    Returns:
        补齐派生字段后的评估答案
    """
    data: dict[str, Any] = dict(raw)

    for key, yes_labels in SERVICE_YES_LABELS.items():
        label = data.get(key)
        if isinstance(label, str):
            data.setdefault(f"{key}Detail", label)
            data[key] = map_service_to_yes_no(label, yes_labels)

    if geography is not None:
        data.update(classify_move(geography))

    return AssessmentResponse.from_raw(data)
