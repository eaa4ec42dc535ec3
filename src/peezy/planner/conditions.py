"""条件求值 -- 判断用户评估答案是否满足目录条目的 conditions

格式：字段名 -> 可接受值列表
- 列表内 OR：用户值匹配任意一个可接受值即通过
- 字段间 AND：所有字段都通过才算满足
- 空条件：对所有人适用

可接受值分两类：
- 字面量：与字符串化后的用户值做大小写无关比较
- 数值比较：">=1" / "<=5" / ">0" / "<10"，两侧都必须是整数

纯函数，不抛异常：缺失字段、格式错误的比较式都只是"不匹配"。
"""

import operator
import re
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models.assessment import AssessmentResponse, ListValue
from .models.catalog import ConditionSet
from .models.enums import AcceptedValueKind, ComparisonOperator

# 字段缺失时可被这些字面量匹配（小写比较）
NIL_LITERALS = frozenset({"nil", ""})

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_COMPARATORS = {
    ComparisonOperator.GE: operator.ge,
    ComparisonOperator.LE: operator.le,
    ComparisonOperator.GT: operator.gt,
    ComparisonOperator.LT: operator.lt,
}


def parse_int(text: str) -> int | None:
    """严格整数解析：仅接受可选符号 + 数字，不允许空白或下划线"""
    if _INTEGER_RE.fullmatch(text) is None:
        return None
    return int(text)


class AcceptedValue(BaseModel):
    """条件列表中的单个可接受值"""

    model_config = ConfigDict(frozen=True)

    raw: str = Field(description="原始文本")
    kind: AcceptedValueKind = Field(description="字面量或数值比较")
    operator: ComparisonOperator | None = Field(default=None, description="比较运算符")
    threshold: int | None = Field(
        default=None,
        description="比较阈值，格式错误时为 None（永不匹配）",
    )

    @property
    def is_literal(self) -> bool:
        return self.kind == AcceptedValueKind.LITERAL

    def matches(self, text: str) -> bool:
        """与字符串化后的用户值比较"""
        if self.is_literal:
            return text.lower() == self.raw.lower()
        if self.threshold is None:
            return False
        number = parse_int(text)
        if number is None:
            return False
        compare = _COMPARATORS.get(self.operator)
        return compare is not None and compare(number, self.threshold)


@lru_cache(maxsize=2048)
def parse_accepted_value(raw: str) -> AcceptedValue:
    """解析可接受值

    以比较运算符开头的视为数值比较（两字符运算符优先），其余为字面量。
    """
    for op in ComparisonOperator:
        if raw.startswith(op.value):
            return AcceptedValue(
                raw=raw,
                kind=AcceptedValueKind.COMPARISON,
                operator=op,
                threshold=parse_int(raw[len(op.value):]),
            )
    return AcceptedValue(raw=raw, kind=AcceptedValueKind.LITERAL)


def field_matches(value: Any, accepted_values: list[str]) -> bool:
    """单个字段的匹配（列表内 OR）

    Args:
        value: 用户值（AssessmentValue 变体），None 表示字段缺失
        accepted_values: 可接受值原文列表
    """
    # 字段缺失：仅 "nil" 或空字符串可匹配
    if value is None:
        return any(accepted.lower() in NIL_LITERALS for accepted in accepted_values)

    parsed = [parse_accepted_value(accepted) for accepted in accepted_values]

    # 多选：任一选项等于任一字面量即通过，数值比较不适用
    if isinstance(value, ListValue):
        literals = {item.raw.lower() for item in parsed if item.is_literal}
        return any(selected.lower() in literals for selected in value.items)

    text = value.as_text()
    return any(item.matches(text) for item in parsed)


def evaluate_indexed(conditions: ConditionSet | None, index: dict[str, Any]) -> bool:
    """基于已构建的小写 key 索引求值（批量匹配时复用索引）"""
    if not conditions:
        return True

    for field_name, accepted_values in conditions.items():
        # 空列表视为该字段无约束
        if not accepted_values:
            continue
        if not field_matches(index.get(field_name.lower()), accepted_values):
            return False
    return True


def evaluate_conditions(
    conditions: ConditionSet | None,
    data: AssessmentResponse,
) -> bool:
    """判断评估答案是否满足条件集合

    Args:
        conditions: 字段名 -> 可接受值列表；None 或空表示对所有人适用
        data: 用户评估答案

    Returns:
        True 如果所有字段条件都通过
    """
    if not conditions:
        return True
    return evaluate_indexed(conditions, data.field_index())
