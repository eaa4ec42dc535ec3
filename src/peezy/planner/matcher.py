"""目录匹配 -- 从任务目录中筛出适用于某个用户的条目

初始生成时排除子任务（parent_id 非空），子任务等对应 mini-assessment 完成后再生成。
输出按 entry_id 排序，相同输入得到相同顺序。
"""

from collections.abc import Iterable

import structlog

from .conditions import evaluate_indexed
from .models.assessment import AssessmentResponse
from .models.catalog import CatalogEntry

log = structlog.get_logger()


def match_catalog(
    entries: Iterable[CatalogEntry],
    data: AssessmentResponse,
    exclude_child_entries: bool,
) -> list[CatalogEntry]:
    """筛选适用的目录条目

    Args:
        entries: 候选目录条目
        data: 评估答案（核心评估或合并视图）
        exclude_child_entries: True 时跳过所有子任务条目

    Returns:
        条件通过的条目，按 entry_id 排序
    """
    index = data.field_index()
    matched: list[CatalogEntry] = []

    for entry in entries:
        if exclude_child_entries and entry.is_child:
            continue
        if evaluate_indexed(entry.conditions, index):
            matched.append(entry)
        else:
            log.debug(
                "catalog_entry_skipped",
                entry_id=entry.entry_id,
                condition_fields=sorted(entry.conditions),
            )

    matched.sort(key=lambda entry: entry.entry_id)
    return matched


def children_of(entries: Iterable[CatalogEntry], parent_id: str) -> list[CatalogEntry]:
    """筛选属于指定 mini-assessment 的子任务条目"""
    return [entry for entry in entries if entry.parent_id == parent_id]
