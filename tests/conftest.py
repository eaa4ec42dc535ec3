"""全局 pytest 配置 -- 临时 SQLite 数据库 + 可控时钟 + 样例目录 fixture"""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from peezy.planner.clock import FixedClock
from peezy.planner.models import CatalogEntry
from peezy.planner.store import StoreGroup, create_store_group

TODAY = date(2025, 1, 1)
MOVE_DATE = date(2025, 1, 31)


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from peezy.planner.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "conn.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """提供共享连接的 Store 实例组"""
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.close()


@pytest.fixture
def clock() -> FixedClock:
    """固定在 2025-01-01 的时钟"""
    return FixedClock(TODAY)


@pytest.fixture
def sample_catalog() -> list[CatalogEntry]:
    """覆盖无条件 / 布尔 / 多选 / 数值比较 / nil / 子任务的样例目录"""
    records = [
        {
            "taskId": "book_movers",
            "title": "Book movers",
            "category": "moving",
            "urgencyPercentage": 80,
            "conditions": {"hireMovers": ["Yes"]},
        },
        {
            "taskId": "change_address_usps",
            "title": "Forward mail with USPS",
            "urgencyPercentage": 50,
            "latestDaysBeforeMove": 5,
        },
        {
            "taskId": "school_records",
            "title": "Transfer school records",
            "urgencyPercentage": 60,
            "conditions": {"childrenCount": [">=1"]},
        },
        {
            "taskId": "gym_transfer",
            "title": "Transfer gym membership",
            "urgencyPercentage": 30,
            "conditions": {"fitnessWellness": ["Gym", "Yoga"]},
        },
        {
            "taskId": "no_pets_checklist",
            "title": "Clean-out checklist",
            "urgencyPercentage": 20,
            "conditions": {"petType": ["nil"]},
        },
        {
            "taskId": "update_bank_address",
            "title": "Update bank address",
            "urgencyPercentage": 70,
            "parentTask": "address_change_financial",
            "conditions": {"hasBankAccount": ["Yes"]},
        },
        {
            "taskId": "update_credit_card_address",
            "title": "Update credit card address",
            "urgencyPercentage": 70,
            "parentTask": "address_change_financial",
            "conditions": {"creditCards": [">=1"], "hireMovers": ["Yes"]},
        },
        {
            "taskId": "update_investment_address",
            "title": "Update brokerage address",
            "urgencyPercentage": 40,
            "parentTask": "address_change_financial",
            "conditions": {"hasInvestments": ["Yes"]},
        },
        {
            "taskId": "update_doctor_address",
            "title": "Update doctor address",
            "urgencyPercentage": 40,
            "parentTask": "address_change_health",
        },
    ]
    return [CatalogEntry.model_validate(record) for record in records]
