"""全局 pytest 配置 -- 临时数据目录 + 环境变量隔离"""

from pathlib import Path

import pytest

_TASKBOARD_ENV_VARS = (
    "TASKBOARD_DATA_DIR",
    "TASKBOARD_TASKS_FILE",
    "TASKBOARD_DB_PATH",
    "TASKBOARD_STORE_BACKEND",
    "TASKBOARD_API_PREFIX",
    "TASKBOARD_LOG_FORMAT",
    "TASKBOARD_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """每个测试使用独立的数据目录，避免读写仓库内的 data/"""
    for key in _TASKBOARD_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TASKBOARD_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")


@pytest.fixture
def tasks_file(tmp_path: Path) -> Path:
    """临时任务 JSON 文件路径（未创建）"""
    return tmp_path / "data" / "tasks.json"
