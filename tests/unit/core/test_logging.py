"""core/logging.py 테스트"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """루트 로거 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestGetLogFilePath:
    def test_web(self) -> None:
        assert get_log_file_path("web") == Paths.WEB_LOGS_DIR / "web.log"

    def test_other(self) -> None:
        assert get_log_file_path("seed") == Paths.LOGS_DIR / "seed.log"


class TestSetupLogging:
    def test_handlers(self, temp_dir: Path, restore_root_logger) -> None:
        log_file = temp_dir / "logs" / "web.log"

        root = setup_logging("web", log_file=log_file)

        assert log_file.parent.exists()
        kinds = {type(handler) for handler in root.handlers}
        assert TimedRotatingFileHandler in kinds
        assert logging.StreamHandler in kinds
        assert len(root.handlers) == 2

    def test_repeated_setup_does_not_duplicate(self, temp_dir: Path, restore_root_logger) -> None:
        setup_logging("web", log_file=temp_dir / "a.log")
        root = setup_logging("web", log_file=temp_dir / "b.log")

        assert len(root.handlers) == 2

    def test_noisy_loggers_lowered(self, temp_dir: Path, restore_root_logger) -> None:
        setup_logging("web", log_file=temp_dir / "web.log")

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
