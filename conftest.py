"""
pytest 全域 fixtures

提供：
- session fixture：每個測試自動建立 Session，任何結果都保證 teardown
- 失敗時自動截圖（含 Allure 報告附件）
- 命令列參數支援 (--platform)
- 平行執行 (pytest-xdist) 時每個 worker 使用自己的裝置與 port
- 設定 RESULTS_ENDPOINT 時，在結束時推送本次執行摘要
"""

from collections import Counter

import pytest

from config.config import SUPPORTED_PLATFORMS
from uisession.driver_manager import SessionManager
from uisession.exceptions import PublishError
from utils.allure_helper import attach_failure
from utils.logger import current_worker, logger
from utils.parallel import get_device_config, get_server_url
from utils.result_publisher import ResultPublisher

_outcomes: Counter = Counter()


# ── 命令列參數 ──

def pytest_addoption(parser):
    """新增自訂命令列參數"""
    parser.addoption(
        "--platform",
        action="store",
        default="android",
        choices=list(SUPPORTED_PLATFORMS),
        help="測試平台: android / ios / chrome",
    )


# ── Session ──

@pytest.fixture(scope="session")
def platform(request) -> str:
    """取得測試平台"""
    return request.config.getoption("--platform")


@pytest.fixture(scope="function")
def session(request, platform):
    """
    每個測試函式自動建立並銷毀 Session。

    scope=function 確保每個測試獨立，互不影響。
    測試本身失敗時，teardown 錯誤只記錄 log，不會取代原本的失敗。
    """
    worker = current_worker()
    logger.info(f"===== 建立 {platform} session ({worker}) =====")
    sess = SessionManager.start_session(
        platform,
        caps=get_device_config(worker, platform),
        url=get_server_url(worker, platform),
    )
    yield sess
    logger.info("===== 關閉 session =====")
    call_report = getattr(request.node, "rep_call", None)
    test_failed = call_report is not None and call_report.failed
    SessionManager.end_session(raise_errors=not test_failed)


# ── 測試生命週期 Hook ──

@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """測試結束時：紀錄結果，失敗則截圖並附加到 Allure"""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

    if report.when != "call":
        if report.failed:
            _outcomes["error"] += 1
        return

    _outcomes[report.outcome] += 1
    if report.failed:
        logger.error(f"測試失敗: {item.nodeid}")
        attach_failure(item.funcargs.get("session"), item.name)


def pytest_sessionfinish(session, exitstatus):
    """推送本次執行摘要（未設定 RESULTS_ENDPOINT 時略過）"""
    publisher = ResultPublisher()
    if not publisher.enabled or not _outcomes:
        return
    summary = {**_outcomes, "exitstatus": int(exitstatus)}
    try:
        ack = publisher.push(f"run-{current_worker()}", summary)
    except PublishError as e:
        logger.error(f"結果推送失敗: {e}")
        return
    logger.info(f"結果已推送，收據 id: {ack.artifact_id}")
