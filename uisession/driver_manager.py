"""
Session 生命週期管理

負責建立遠端 driver、包成 Session、在測試結束時釋放，確保每個測試 session 獨立。

支援：
- 執行緒安全（平行測試時每個 worker / thread 獨立 Session）
- 連線前健康檢查
- 連線失敗自動重試（指數退避）
- open_session() 保證在任何離開路徑上都會 teardown
"""

import threading
import time
import urllib.error
import urllib.request
from contextlib import contextmanager

from appium import webdriver
from appium.options.android import UiAutomator2Options
from appium.options.ios import XCUITestOptions
from selenium import webdriver as selenium_webdriver

from config.config import Config
from uisession.exceptions import DriverConnectionError, SessionNotStartedError
from uisession.session import Session
from utils.logger import logger


class SessionManager:
    """
    管理遠端 driver 與 Session 的建立與銷毀

    使用 thread-local storage 確保平行測試時各 worker 的 Session 互不干擾。
    """

    _local = threading.local()

    # ── Server 健康檢查 ──

    @classmethod
    def health_check(cls, url: str | None = None, timeout: float = 5.0) -> bool:
        """
        檢查遠端 server 是否可連線。

        Args:
            url: server URL，預設讀取 Config
            timeout: 連線逾時秒數

        Returns:
            True = server 可用, False = 不可用
        """
        url = url or Config.appium_server_url()
        status_url = f"{url.rstrip('/')}/status"
        try:
            req = urllib.request.Request(status_url, method="GET")
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                return resp.status == 200
        except (urllib.error.URLError, OSError, TimeoutError):
            return False

    # ── Driver 建立 ──

    @staticmethod
    def build_options(platform: str, caps: dict):
        """依平台把 capabilities 轉成 driver options"""
        if platform == "android":
            return UiAutomator2Options().load_capabilities(caps)
        if platform == "ios":
            return XCUITestOptions().load_capabilities(caps)
        if platform == "chrome":
            options = selenium_webdriver.ChromeOptions()
            for key, value in caps.items():
                options.set_capability(key, value)
            return options
        raise ValueError(f"不支援的平台: {platform}")

    @classmethod
    def create_driver(
        cls,
        platform: str | None = None,
        caps: dict | None = None,
        url: str | None = None,
        max_retries: int = 3,
        retry_delay: float = 2.0,
    ):
        """
        根據平台建立遠端 driver，支援自動重試。

        Args:
            platform: 'android'、'ios' 或 'chrome'，預設讀取 Config.PLATFORM
            caps: capabilities，預設從 <platform>_caps.json 載入
            url: server URL，預設依平台讀取 Config
            max_retries: 連線失敗時最多重試次數
            retry_delay: 首次重試等待秒數（後續指數退避）

        Returns:
            Appium / Selenium WebDriver 實例
        """
        platform = platform or Config.PLATFORM
        caps = caps if caps is not None else Config.load_caps(platform)
        options = cls.build_options(platform, caps)
        url = url or Config.remote_url(platform)
        remote = selenium_webdriver.Remote if platform == "chrome" else webdriver.Remote

        if not cls.health_check(url):
            logger.warning(f"Server 健康檢查失敗: {url}，仍嘗試連線...")

        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                drv = remote(command_executor=url, options=options)
                break
            except Exception as e:
                last_error = e
                if attempt < max_retries - 1:
                    wait = retry_delay * (2 ** attempt)
                    logger.warning(
                        f"Driver 連線失敗 (第 {attempt + 1} 次)，"
                        f"{wait:.1f}s 後重試: {e}"
                    )
                    time.sleep(wait)
        else:
            raise DriverConnectionError(url, last_error)

        drv.implicitly_wait(Config.IMPLICIT_WAIT)
        logger.info(f"Driver 已建立: {platform} -> {url}")
        return drv

    # ── Session 管理 ──

    @classmethod
    def start_session(cls, platform: str | None = None, **kwargs) -> Session:
        """
        建立 driver 並包成 Session，存入目前執行緒。

        目前執行緒已有未關閉的 Session 時，先將它 teardown 再建立新的。
        """
        previous = getattr(cls._local, "session", None)
        if previous is not None and not previous.closed:
            logger.warning("目前執行緒已有未關閉的 Session，先行釋放")
            cls.end_session(raise_errors=False)
        timeout = kwargs.pop("timeout", None)
        poll_interval = kwargs.pop("poll_interval", None)
        session = Session(
            cls.create_driver(platform, **kwargs),
            timeout=timeout,
            poll_interval=poll_interval,
        )
        cls._local.session = session
        return session

    @classmethod
    def current(cls) -> Session:
        """取得目前執行緒的 Session"""
        session = getattr(cls._local, "session", None)
        if session is None:
            raise SessionNotStartedError()
        return session

    @classmethod
    def end_session(cls, raise_errors: bool = True) -> None:
        """釋放目前執行緒的 Session（沒有 Session 時不做事）"""
        session = getattr(cls._local, "session", None)
        cls._local.session = None
        if session is not None:
            session.teardown(raise_errors=raise_errors)


@contextmanager
def open_session(platform: str | None = None, **kwargs):
    """
    以 with 區塊管理 Session，任何離開路徑都會 teardown。

    區塊內已經拋出例外時，teardown 錯誤只記錄 log，不會蓋掉原本的例外。

    用法：
        with open_session("android") as session:
            LoginPage(session).login("user", "pass")
    """
    session = SessionManager.start_session(platform, **kwargs)
    failed = False
    try:
        yield session
    except BaseException:
        failed = True
        raise
    finally:
        SessionManager.end_session(raise_errors=not failed)
