"""
日誌模組
統一的 logging 設定，同時輸出到 console 與檔案。

平行執行時（pytest-xdist）每個 worker 寫入自己的 log 檔，
每筆紀錄都帶 worker 與 thread 名稱，方便追查是哪個 Session 發生的事。

環境變數：
    LOG_LEVEL: console 日誌等級 (預設 INFO)
    LOG_JSON: 設為 "1" 啟用 JSON 結構化日誌檔
    LOG_DIR: 日誌目錄 (預設 <專案>/reports)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

LOG_DIR = Path(
    os.getenv("LOG_DIR", Path(__file__).resolve().parent.parent / "reports")
)
LOG_DIR.mkdir(parents=True, exist_ok=True)


def current_worker() -> str:
    """pytest-xdist worker id，非平行模式為 master"""
    return os.getenv("PYTEST_XDIST_WORKER", "master")


class WorkerFilter(logging.Filter):
    """在每筆紀錄加上 worker 欄位"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.worker = current_worker()
        return True


class JsonFormatter(logging.Formatter):
    """JSON 結構化日誌格式器，適合 ELK / Loki 等日誌系統"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "worker": getattr(record, "worker", current_worker()),
            "thread": record.threadName,
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def _create_logger() -> logging.Logger:
    _logger = logging.Logger("uisession")
    _logger.setLevel(logging.DEBUG)
    _logger.addFilter(WorkerFilter())

    console_level = getattr(
        logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO
    )
    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-7s [%(worker)s/%(threadName)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    worker = current_worker()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    _logger.addHandler(console)

    file_handler = logging.FileHandler(LOG_DIR / f"test-{worker}.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    _logger.addHandler(file_handler)

    if os.getenv("LOG_JSON", "").strip() == "1":
        json_handler = logging.FileHandler(
            LOG_DIR / f"test-{worker}.json.log", encoding="utf-8"
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JsonFormatter())
        _logger.addHandler(json_handler)

    return _logger


logger = _create_logger()
