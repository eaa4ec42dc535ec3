"""Assessment Domain Model

评估答案是字段名到值的映射，值为以下四种之一：
字符串、布尔、数字、字符串列表（多选题）。
使用带 kind 判别字段的联合类型表示，条件求值时按变体处理字符串化。
字段缺失是合法状态（可被条件 "nil" 匹配），不是错误。
"""

import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class StringValue(BaseModel):
    """单选/文本答案"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str

    def as_text(self) -> str:
        return self.value

    def to_raw(self) -> str:
        return self.value


class BoolValue(BaseModel):
    """是/否答案，字符串化为 "Yes"/"No" """

    model_config = ConfigDict(frozen=True)

    kind: Literal["bool"] = "bool"
    value: bool

    def as_text(self) -> str:
        return "Yes" if self.value else "No"

    def to_raw(self) -> bool:
        return self.value


class NumberValue(BaseModel):
    """数值答案（如孩子数量），字符串化时向零截断为整数"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    value: int | float

    def as_text(self) -> str:
        if isinstance(self.value, float) and not math.isfinite(self.value):
            # NaN/inf 无法截断为整数，保留原文本，数值比较时自然不匹配
            return str(self.value)
        return str(int(self.value))

    def to_raw(self) -> int | float:
        return self.value


class ListValue(BaseModel):
    """多选题答案（如 fitnessWellness: ["Yoga", "Gym"]）"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    items: tuple[str, ...] = ()

    def as_text(self) -> str:
        return ", ".join(self.items)

    def to_raw(self) -> list[str]:
        return list(self.items)


AssessmentValue = Annotated[
    StringValue | BoolValue | NumberValue | ListValue,
    Field(discriminator="kind"),
]


def wrap_value(raw: Any) -> StringValue | BoolValue | NumberValue | ListValue | None:
    """将原始 Python 值包装为 AssessmentValue 变体

    None 返回 None（调用方视为字段缺失）。
    bool 必须先于 int 判断（bool 是 int 的子类）。

    Raises:
        TypeError: 不支持的值类型
    """
    if raw is None:
        return None
    if isinstance(raw, StringValue | BoolValue | NumberValue | ListValue):
        return raw
    if isinstance(raw, bool):
        return BoolValue(value=raw)
    if isinstance(raw, int | float):
        return NumberValue(value=raw)
    if isinstance(raw, str):
        return StringValue(value=raw)
    if isinstance(raw, list | tuple):
        return ListValue(items=tuple(str(item) for item in raw))
    raise TypeError(f"不支持的评估值类型: {type(raw).__name__}")


class AssessmentResponse(BaseModel):
    """评估答案集合 -- 交给引擎后不可变

    answers 的 key 保留提交方原始大小写；
    条件求值时通过 field_index() 做大小写无关查找。
    """

    model_config = ConfigDict(frozen=True)

    answers: dict[str, AssessmentValue] = Field(
        default_factory=dict,
        description="字段名 -> 答案",
    )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> "AssessmentResponse":
        """从原始映射构建（值为 None 的字段丢弃，视为缺失）"""
        answers: dict[str, Any] = {}
        for key, value in (raw or {}).items():
            wrapped = wrap_value(value)
            if wrapped is not None:
                answers[key] = wrapped
        return cls(answers=answers)

    def to_raw(self) -> dict[str, Any]:
        """转换回原始映射（用于 JSON 持久化）"""
        return {key: value.to_raw() for key, value in self.answers.items()}

    def merged_with(self, other: "AssessmentResponse") -> "AssessmentResponse":
        """合并另一组答案，key 冲突（忽略大小写）时 other 优先"""
        overridden = {key.lower() for key in other.answers}
        merged = {
            key: value
            for key, value in self.answers.items()
            if key.lower() not in overridden
        }
        merged.update(other.answers)
        return AssessmentResponse(answers=merged)

    def field_index(self) -> dict[str, StringValue | BoolValue | NumberValue | ListValue]:
        """构建小写 key 索引，同名（忽略大小写）字段以先出现者为准"""
        index: dict[str, Any] = {}
        for key, value in self.answers.items():
            index.setdefault(key.lower(), value)
        return index

    def __len__(self) -> int:
        return len(self.answers)
