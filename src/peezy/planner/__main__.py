"""CLI 入口模块 -- python -m peezy.planner <command>

支持的命令：
  seed-catalog <file.json>                          清空并导入任务目录
  generate <user_id> <assessment.json> <YYYY-MM-DD> 为用户生成任务
  list-tasks <user_id>                              列出用户任务
"""

import asyncio
import json
import sys
from datetime import date
from pathlib import Path

from .config import get_db_path

_USAGE = [
    "用法: python -m peezy.planner <command>",
    "命令:",
    "  seed-catalog <file.json>                          清空并导入任务目录",
    "  generate <user_id> <assessment.json> <YYYY-MM-DD> 为用户生成任务",
    "  list-tasks <user_id>                              列出用户任务",
]


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("\n".join(_USAGE))
        sys.exit(1)

    command, args = sys.argv[1], sys.argv[2:]

    if command == "seed-catalog" and len(args) == 1:
        asyncio.run(seed_catalog(Path(args[0])))
    elif command == "generate" and len(args) == 3:
        asyncio.run(generate(args[0], Path(args[1]), date.fromisoformat(args[2])))
    elif command == "list-tasks" and len(args) == 1:
        asyncio.run(list_tasks(args[0]))
    else:
        print(f"未知命令或参数错误: {' '.join(sys.argv[1:])}")
        print("可用命令: seed-catalog, generate, list-tasks")
        sys.exit(1)


async def seed_catalog(path: Path) -> int:
    """清空并导入目录 JSON（顶层为数组，或 {"tasks": [...]}）"""
    from .services.catalog_loader import load_catalog_records
    from .store import create_store_group
    from .store.transaction import replace_catalog

    raw = json.loads(path.read_text(encoding="utf-8"))
    records = raw.get("tasks", []) if isinstance(raw, dict) else raw
    entries = load_catalog_records(records)

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        count = await replace_catalog(
            store_group.conn,
            store_group.catalog_store,
            entries,
            store_group.write_lock,
        )
        print(f"导入完成，共 {count} 个目录条目")
        return count
    finally:
        await store_group.close()


async def generate(user_id: str, assessment_path: Path, move_date: date) -> int:
    """读取评估 JSON 并为用户生成任务"""
    from .clock import SystemClock
    from .derived import derive_condition_fields
    from .services.generation import TaskGenerationPipeline
    from .store import create_store_group

    raw = json.loads(assessment_path.read_text(encoding="utf-8"))
    data = derive_condition_fields(raw)

    store_group = await create_store_group(get_db_path())
    try:
        pipeline = TaskGenerationPipeline(store_group, SystemClock())
        result = await pipeline.generate(user_id, data, move_date)
        print(f"生成完成: {result.count} 个任务 (事件 {result.event_id})")
        return result.count
    finally:
        await store_group.close()


async def list_tasks(user_id: str) -> int:
    """按截止日期列出用户任务"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        tasks = await store_group.task_reader.list_tasks(user_id)
        for task in tasks:
            print(f"{task.due_date.isoformat()}  {task.status.value:<10}  {task.task_id}  {task.title}")
        print(f"共 {len(tasks)} 个任务")
        return len(tasks)
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
