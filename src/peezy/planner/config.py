"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、目录默认紧急度、系统任务开关等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("PEEZY_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "PEEZY_DB_PATH",
        str(_get_base_dir() / "sqlite" / "peezy.db"),
    )


# 目录原始记录缺少 urgencyPercentage 时的默认值（仅导入目录时使用）
DEFAULT_URGENCY_PERCENTAGE: int = int(os.environ.get("PEEZY_DEFAULT_URGENCY", "50"))

# 系统任务紧急度
ASSESSMENT_TASK_URGENCY: int = 100
MINI_ASSESSMENT_TASK_URGENCY: int = 85

# 搬家距离分界（英里），>= 此值为 Long Distance
LONG_DISTANCE_MILES: float = 50.0
