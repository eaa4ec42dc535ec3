"""目录导入 -- 原始 JSON 记录校验为 CatalogEntry"""

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from ..config import DEFAULT_URGENCY_PERCENTAGE
from ..exceptions import CatalogValidationError
from ..models.catalog import CatalogEntry
from ..system_tasks import RESERVED_TASK_IDS

_URGENCY_KEYS = ("urgency_percentage", "urgencyPercentage")


def load_catalog_records(
    records: Iterable[dict[str, Any]],
    default_urgency: int = DEFAULT_URGENCY_PERCENTAGE,
) -> list[CatalogEntry]:
    """校验原始目录记录

    缺少紧急度的记录使用 default_urgency；entry_id 重复或与系统任务 ID
    冲突（会在同一批次里产生同主键的两行）视为错误。

    Raises:
        CatalogValidationError: 任一记录校验失败
    """
    entries: list[CatalogEntry] = []
    errors: list[dict] = []
    seen: set[str] = set()

    for position, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append({"index": position, "msg": "记录必须是 JSON 对象"})
            continue
        data = dict(record)
        if not any(data.get(key) is not None for key in _URGENCY_KEYS):
            data["urgency_percentage"] = default_urgency
        try:
            entry = CatalogEntry.model_validate(data)
        except ValidationError as e:
            errors.append({"index": position, "msg": str(e)})
            continue
        if entry.entry_id in RESERVED_TASK_IDS:
            errors.append({"index": position, "msg": f"entry_id 为系统任务保留: {entry.entry_id}"})
            continue
        if entry.entry_id in seen:
            errors.append({"index": position, "msg": f"entry_id 重复: {entry.entry_id}"})
            continue
        seen.add(entry.entry_id)
        entries.append(entry)

    if errors:
        raise CatalogValidationError(
            f"目录校验失败: {len(errors)} 条记录无效",
            errors=errors,
        )
    return entries
