"""
uisession.waits 單元測試
驗證 WaitPolicy 的輪詢、逾時精度、例外處理，以及 wait_for / retry。
"""

import time

import pytest
from selenium.common.exceptions import NoSuchElementException

from uisession.exceptions import (
    ElementNotFoundError,
    StaleElementError,
    WaitTimeoutError,
)
from uisession.locator import Locator
from uisession.waits import WaitPolicy, retry, wait_for


@pytest.mark.unit
class TestWaitPolicyInit:
    """WaitPolicy 初始化"""

    @pytest.mark.unit
    def test_defaults_come_from_config(self, monkeypatch):
        """未指定時使用 Config.EXPLICIT_WAIT / POLL_INTERVAL"""
        monkeypatch.setattr("uisession.waits.Config.EXPLICIT_WAIT", 7.0)
        monkeypatch.setattr("uisession.waits.Config.POLL_INTERVAL", 0.25)
        policy = WaitPolicy()
        assert policy.timeout == 7.0
        assert policy.interval == 0.25

    @pytest.mark.unit
    def test_zero_timeout_is_allowed(self):
        """timeout=0 合法（只評估一次）"""
        assert WaitPolicy(0, 0.1).timeout == 0

    @pytest.mark.unit
    def test_negative_timeout_raises(self):
        with pytest.raises(ValueError, match="timeout"):
            WaitPolicy(-1, 0.1)

    @pytest.mark.unit
    def test_non_positive_interval_raises(self):
        with pytest.raises(ValueError, match="interval"):
            WaitPolicy(1, 0)


@pytest.mark.unit
class TestWaitPolicyUntil:
    """WaitPolicy.until 行為"""

    @pytest.mark.unit
    def test_returns_first_truthy_result_immediately(self):
        """條件第一次就成立，不需等待"""
        calls = []

        def condition():
            calls.append(1)
            return "ready"

        start = time.monotonic()
        assert WaitPolicy(5, 0.5).until(condition) == "ready"
        assert len(calls) == 1
        assert time.monotonic() - start < 0.5

    @pytest.mark.unit
    def test_polls_until_condition_holds(self):
        """條件多次不成立後成功"""
        counter = {"n": 0}

        def condition():
            counter["n"] += 1
            return "ok" if counter["n"] >= 3 else None

        assert WaitPolicy(2, 0.05).until(condition) == "ok"
        assert counter["n"] == 3

    @pytest.mark.unit
    def test_always_false_times_out_within_one_interval(self):
        """200ms / 50ms：約 200-250ms 後逾時，評估約 4-5 次"""
        counter = {"n": 0}

        def condition():
            counter["n"] += 1
            return False

        start = time.monotonic()
        with pytest.raises(WaitTimeoutError) as exc_info:
            WaitPolicy(0.2, 0.05).until(condition)
        elapsed = time.monotonic() - start

        assert 0.2 <= elapsed < 0.2 + 0.05 + 0.05
        assert 4 <= counter["n"] <= 6
        assert exc_info.value.attempts == counter["n"]

    @pytest.mark.unit
    @pytest.mark.parametrize("timeout, interval", [(0.1, 0.03), (0.15, 0.1), (0.3, 0.07)])
    def test_timeout_never_early_never_past_interval(self, timeout, interval):
        """不早於 T 逾時，也不晚於 T + p"""
        start = time.monotonic()
        with pytest.raises(WaitTimeoutError):
            WaitPolicy(timeout, interval).until(lambda: None)
        elapsed = time.monotonic() - start
        assert timeout <= elapsed < timeout + interval + 0.05

    @pytest.mark.unit
    def test_no_evaluation_after_deadline(self):
        """逾時後不再呼叫條件"""
        stamps = []
        start = time.monotonic()

        def condition():
            stamps.append(time.monotonic() - start)
            return False

        with pytest.raises(WaitTimeoutError):
            WaitPolicy(0.2, 0.05).until(condition)
        count = len(stamps)
        time.sleep(0.1)
        assert len(stamps) == count
        assert stamps[-1] < 0.2 + 0.05

    @pytest.mark.unit
    def test_transient_not_found_is_retried(self):
        """ElementNotFoundError / NoSuchElementException 視為尚未成立"""
        counter = {"n": 0}

        def condition():
            counter["n"] += 1
            if counter["n"] == 1:
                raise ElementNotFoundError(Locator.by_id("x"))
            if counter["n"] == 2:
                raise NoSuchElementException("not yet")
            return "found"

        assert WaitPolicy(2, 0.01).until(condition) == "found"
        assert counter["n"] == 3

    @pytest.mark.unit
    def test_non_transient_error_propagates_immediately(self):
        """非暫時性例外立即往上拋，不等到逾時"""
        counter = {"n": 0}

        def condition():
            counter["n"] += 1
            raise StaleElementError(Locator.by_id("x"))

        start = time.monotonic()
        with pytest.raises(StaleElementError):
            WaitPolicy(5, 0.05).until(condition)
        assert counter["n"] == 1
        assert time.monotonic() - start < 1

    @pytest.mark.unit
    def test_timeout_includes_message_and_last_exception(self):
        """逾時錯誤包含自訂訊息與最後一個被忽略的例外"""
        def condition():
            raise ElementNotFoundError(Locator.by_id("btn_login"))

        with pytest.raises(WaitTimeoutError, match="登入按鈕未出現") as exc_info:
            WaitPolicy(0.1, 0.02).until(condition, message="登入按鈕未出現")

        assert "btn_login" in str(exc_info.value)
        assert isinstance(exc_info.value.last_exception, ElementNotFoundError)

    @pytest.mark.unit
    def test_timeout_error_is_builtin_timeout(self):
        """WaitTimeoutError 也是內建 TimeoutError"""
        with pytest.raises(TimeoutError):
            WaitPolicy(0, 0.01).until(lambda: False)

    @pytest.mark.unit
    def test_custom_ignoring(self):
        """可自訂要忽略的例外"""
        counter = {"n": 0}

        def condition():
            counter["n"] += 1
            if counter["n"] < 2:
                raise ConnectionError("flaky")
            return True

        assert WaitPolicy(1, 0.01, ignoring=(ConnectionError,)).until(condition) is True


@pytest.mark.unit
class TestWaitFor:
    """wait_for 簡寫"""

    @pytest.mark.unit
    def test_delegates_to_policy(self):
        assert wait_for(lambda: 42, timeout=1, interval=0.1) == 42

    @pytest.mark.unit
    def test_custom_message(self):
        with pytest.raises(WaitTimeoutError, match="自訂訊息"):
            wait_for(lambda: False, timeout=0.1, interval=0.05, message="自訂訊息")


@pytest.mark.unit
class TestRetry:
    """retry 函式"""

    @pytest.mark.unit
    def test_immediate_success(self):
        assert retry(lambda: 42, max_attempts=3) == 42

    @pytest.mark.unit
    def test_retry_on_failure(self):
        """失敗後重試成功"""
        counter = {"n": 0}

        def flaky():
            counter["n"] += 1
            if counter["n"] < 3:
                raise ValueError("not yet")
            return "ok"

        assert retry(flaky, max_attempts=3, delay=0.01) == "ok"

    @pytest.mark.unit
    def test_exhausted_retries_reraises(self):
        """重試用盡後拋出最後一個例外"""
        def always_fails():
            raise ValueError("always fails")

        with pytest.raises(ValueError, match="always fails"):
            retry(always_fails, max_attempts=2, delay=0.01)

    @pytest.mark.unit
    def test_unlisted_exception_not_retried(self):
        """不在 exceptions 裡的例外不重試"""
        counter = {"n": 0}

        def raise_type():
            counter["n"] += 1
            raise TypeError("wrong type")

        with pytest.raises(TypeError):
            retry(raise_type, max_attempts=3, delay=0.01, exceptions=(ValueError,))
        assert counter["n"] == 1
