"""
等待與重試工具
提供輪詢式的條件等待 (WaitPolicy) 與重試機制，取代固定秒數的 sleep。

用法：
    from uisession.waits import WaitPolicy, wait_for, retry

    # 等待條件成立，回傳條件的回傳值
    handle = WaitPolicy(timeout=10, interval=0.3).until(
        lambda: session.resolve(LOGIN_BTN),
        message="登入按鈕未出現",
    )

    # 簡易等待
    wait_for(lambda: handle.is_visible(), timeout=5)

    # 重試
    retry(api_call, max_attempts=3, delay=1.0)
"""

import time
from typing import Callable, TypeVar

from selenium.common.exceptions import NoSuchElementException

from config.config import Config
from uisession.exceptions import ElementNotFoundError, WaitTimeoutError
from utils.logger import logger

T = TypeVar("T")

# 視為「尚未成立」的暫時性例外，其餘例外一律立即往上拋
TRANSIENT_ERRORS: tuple = (ElementNotFoundError, NoSuchElementException)


class WaitPolicy:
    """
    輪詢等待器

    - 依 interval 反覆評估條件，第一次 truthy 立即回傳
    - ignoring 內的例外視為尚未成立，繼續輪詢
    - 其他例外不重試，立即往上拋
    - 逾時拋出 WaitTimeoutError，逾時後不再呼叫條件
    """

    def __init__(
        self,
        timeout: float | None = None,
        interval: float | None = None,
        ignoring: tuple = TRANSIENT_ERRORS,
    ):
        self.timeout = Config.EXPLICIT_WAIT if timeout is None else timeout
        self.interval = Config.POLL_INTERVAL if interval is None else interval
        self.ignoring = tuple(ignoring)

        if self.timeout < 0:
            raise ValueError(f"timeout 不可為負數: {self.timeout}")
        if self.interval <= 0:
            raise ValueError(f"interval 必須大於 0: {self.interval}")

    def until(self, condition: Callable[[], T], message: str = "") -> T:
        """
        等待條件成立。

        Args:
            condition: 回傳值為 truthy 時視為成立的 callable
            message: 逾時時顯示的錯誤訊息

        Returns:
            condition 的回傳值

        Raises:
            WaitTimeoutError: 超過 timeout 仍未成立
        """
        deadline = time.monotonic() + self.timeout
        last_exception = None
        attempts = 0

        while True:
            attempts += 1
            try:
                result = condition()
                if result:
                    return result
            except self.ignoring as e:
                last_exception = e

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            # 不睡超過 deadline，確保逾時誤差不超過一個 interval
            time.sleep(min(self.interval, remaining))

        logger.debug(
            f"等待逾時: {message or condition!r} "
            f"({self.timeout}s, 共評估 {attempts} 次)"
        )
        raise WaitTimeoutError(self.timeout, message, attempts, last_exception)


def wait_for(
    condition: Callable[[], T],
    timeout: float | None = None,
    interval: float | None = None,
    message: str = "",
) -> T:
    """WaitPolicy(timeout, interval).until(condition) 的簡寫"""
    return WaitPolicy(timeout, interval).until(condition, message)


def retry(
    func: Callable[[], T],
    max_attempts: int = 3,
    delay: float = 1.0,
    exceptions: tuple = (Exception,),
) -> T:
    """
    重試機制，遇到指定例外時自動重試。

    Args:
        func: 要執行的 callable
        max_attempts: 最大嘗試次數
        delay: 每次重試間隔秒數
        exceptions: 要攔截重試的例外類型

    Returns:
        func 的回傳值

    Raises:
        最後一次嘗試的例外
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return func()
        except exceptions as e:
            logger.warning(f"第 {attempt}/{max_attempts} 次嘗試失敗: {e}")
            if attempt == max_attempts:
                raise
            time.sleep(delay)
