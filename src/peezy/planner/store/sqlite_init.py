"""SQLite 数据库初始化

PRAGMA 配置 + 五张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# catalog_entries 表 DDL（条目整体以 JSON 存储，引擎在内存中过滤）
_CATALOG_DDL = """
CREATE TABLE IF NOT EXISTS catalog_entries (
    entry_id    TEXT PRIMARY KEY,
    parent_id   TEXT,
    payload     TEXT NOT NULL DEFAULT '{}'
);
"""

# user_assessments 表 DDL（核心评估，每用户一行）
_ASSESSMENTS_DDL = """
CREATE TABLE IF NOT EXISTS user_assessments (
    user_id     TEXT PRIMARY KEY,
    answers     TEXT NOT NULL DEFAULT '{}',
    updated_at  TEXT NOT NULL
);
"""

# mini_assessments 表 DDL（每用户每个 mini-assessment 一行，答案合并写入）
_MINI_ASSESSMENTS_DDL = """
CREATE TABLE IF NOT EXISTS mini_assessments (
    user_id         TEXT NOT NULL,
    parent_id       TEXT NOT NULL,
    answers         TEXT NOT NULL DEFAULT '{}',
    completion_seq  INTEGER NOT NULL,
    completed_at    TEXT NOT NULL,

    PRIMARY KEY (user_id, parent_id)
);
"""

# user_tasks 表 DDL（主键 (user_id, task_id)，重复生成时 upsert）
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS user_tasks (
    user_id             TEXT NOT NULL,
    task_id             TEXT NOT NULL,
    title               TEXT NOT NULL DEFAULT '',
    description         TEXT NOT NULL DEFAULT '',
    category            TEXT NOT NULL DEFAULT 'custom',
    tips                TEXT NOT NULL DEFAULT '',
    rationale           TEXT NOT NULL DEFAULT '',
    est_hours           REAL NOT NULL DEFAULT 0,
    priority            TEXT NOT NULL DEFAULT '',
    urgency_percentage  INTEGER NOT NULL,
    due_date            TEXT NOT NULL,
    status              TEXT NOT NULL DEFAULT 'Upcoming',
    source              TEXT NOT NULL DEFAULT 'assessment',
    parent_id           TEXT,
    workflow_id         TEXT,
    icon                TEXT NOT NULL DEFAULT '',
    created_at          TEXT NOT NULL,
    updated_at          TEXT NOT NULL,
    completed_at        TEXT,

    PRIMARY KEY (user_id, task_id)
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_user_tasks_status ON user_tasks(user_id, status);",
    "CREATE INDEX IF NOT EXISTS idx_user_tasks_parent ON user_tasks(user_id, parent_id);",
    "CREATE INDEX IF NOT EXISTS idx_user_tasks_due ON user_tasks(user_id, due_date);",
]

_MINI_ASSESSMENTS_INDEXES = [
    # 用户内完成顺序唯一（合并视图按此顺序叠加）
    (
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_mini_assessments_seq "
        "ON mini_assessments(user_id, completion_seq);"
    ),
]

# planner_events 表 DDL（append-only 审计）
_EVENTS_DDL = """
CREATE TABLE IF NOT EXISTS planner_events (
    event_id    TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    ts          TEXT NOT NULL,
    type        TEXT NOT NULL,
    payload     TEXT NOT NULL DEFAULT '{}'
);
"""

_EVENTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_planner_events_user_ts ON planner_events(user_id, ts);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    for ddl in (_CATALOG_DDL, _ASSESSMENTS_DDL, _MINI_ASSESSMENTS_DDL, _TASKS_DDL, _EVENTS_DDL):
        await conn.execute(ddl)

    # 创建索引
    for idx_sql in _TASKS_INDEXES + _MINI_ASSESSMENTS_INDEXES + _EVENTS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"


async def init_read_conn(conn: aiosqlite.Connection) -> None:
    """配置只读连接

    WAL 模式下只读连接每条查询读取最近一次已提交的快照，
    看不到写连接上未提交的事务。
    """
    await conn.execute("PRAGMA query_only = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")
