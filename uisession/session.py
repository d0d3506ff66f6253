"""
Session — 遠端 automation 連線的擁有者

負責：
- 將 Locator 解析成 ElementHandle（可限定在某個元素底下）
- 以 WaitPolicy 包裝解析，作為預設的查找入口 (wait_for)
- Hybrid App 的 Native / WebView context 切換
- 連線釋放：teardown() 只會真正關閉一次，且不會蓋掉原本的測試錯誤

每次 context 切換或頁面導航都會遞增 generation，
舊 generation 的 ElementHandle 一律視為失效。

用法：
    with Session(driver) as session:
        session.wait_for(LOGIN_BTN, visible=True).click()
        session.switch_to_webview()
        session.wait_for(Locator.css("#help")).text()
"""

from __future__ import annotations

from selenium.common.exceptions import StaleElementReferenceException

from config.config import Config
from uisession.element import ElementHandle
from uisession.exceptions import (
    ContextNotFoundError,
    ElementNotFoundError,
    SessionClosedError,
    SessionTeardownError,
    StaleElementError,
    UnsupportedOperationError,
)
from uisession.locator import Locator
from uisession.waits import WaitPolicy
from utils.logger import logger
from utils.screenshot import take_screenshot


class Session:
    """一個測試執行單位獨占的遠端連線"""

    def __init__(
        self,
        driver,
        timeout: float | None = None,
        poll_interval: float | None = None,
        native_context: str | None = None,
    ):
        self.driver = driver
        self.timeout = Config.EXPLICIT_WAIT if timeout is None else timeout
        self.poll_interval = (
            Config.POLL_INTERVAL if poll_interval is None else poll_interval
        )
        self.native_context = native_context or Config.NATIVE_CONTEXT
        self._context = self.native_context
        self._generation = 0
        self._closed = False

    def __repr__(self) -> str:
        state = "closed" if self._closed else self._context
        return f"<Session {state} gen={self._generation}>"

    # ── 狀態 ──

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_context(self) -> str:
        return self._context

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError()

    def check_handle(self, handle: ElementHandle) -> None:
        """確認 handle 屬於目前的 generation"""
        self._ensure_open()
        if handle.generation != self._generation:
            raise StaleElementError(handle.locator)

    def invalidate(self) -> None:
        """讓目前所有已解析的 ElementHandle 失效"""
        self._generation += 1

    # ── 元素解析 ──

    def _find(self, locator: Locator, within: ElementHandle | None) -> list:
        self._ensure_open()
        root = within._live() if within is not None else self.driver
        try:
            return root.find_elements(*locator.as_tuple())
        except StaleElementReferenceException as e:
            raise StaleElementError(within.locator if within else locator) from e

    def resolve(self, locator: Locator,
                within: ElementHandle | None = None) -> ElementHandle:
        """
        解析 locator，不等待。

        多個元素匹配時回傳第一個；DOM 順序不穩定時結果不保證固定。

        Raises:
            ElementNotFoundError: 沒有任何元素匹配
            StaleElementError: within 已失效
        """
        matches = self._find(locator, within)
        if not matches:
            raise ElementNotFoundError(locator)
        return ElementHandle(self, matches[0], locator, self._generation)

    def resolve_all(self, locator: Locator,
                    within: ElementHandle | None = None) -> list[ElementHandle]:
        """解析所有匹配元素，沒有匹配時回傳空列表"""
        return [
            ElementHandle(self, el, locator, self._generation)
            for el in self._find(locator, within)
        ]

    def wait_for(
        self,
        locator: Locator,
        timeout: float | None = None,
        within: ElementHandle | None = None,
        visible: bool = False,
    ) -> ElementHandle:
        """
        等待元素出現並回傳（預設的查找入口）。

        每次輪詢都重新解析，不重用上一輪的參照。

        Args:
            locator: 要找的元素
            timeout: 最長等待秒數，預設使用 Session.timeout
            within: 限定搜尋範圍的父元素
            visible: True 時還需等到元素可見

        Raises:
            WaitTimeoutError: 逾時仍未找到
        """
        timeout = self.timeout if timeout is None else timeout

        def probe() -> ElementHandle | None:
            handle = self.resolve(locator, within)
            if not visible:
                return handle
            try:
                return handle if handle._element.is_displayed() else None
            except StaleElementReferenceException:
                # 剛解析就被重繪，下一輪重新解析
                return None

        state = "可見" if visible else "出現"
        return WaitPolicy(timeout, self.poll_interval).until(
            probe, message=f"等待元素{state}逾時 ({timeout}s): {locator}",
        )

    def wait_until(self, condition, timeout: float | None = None,
                   message: str = ""):
        """以 Session 的預設 timeout / interval 等待任意條件"""
        self._ensure_open()
        timeout = self.timeout if timeout is None else timeout
        return WaitPolicy(timeout, self.poll_interval).until(condition, message)

    # ── Context 切換 ──

    def _driver_contexts(self) -> list[str]:
        self._ensure_open()
        try:
            return list(self.driver.contexts)
        except AttributeError as e:
            raise UnsupportedOperationError("contexts", e) from e

    def contexts(self) -> set[str]:
        """取得所有可用的 context（Native + 目前掛載的 WebView）"""
        contexts = set(self._driver_contexts())
        logger.debug(f"可用 contexts: {sorted(contexts)}")
        return contexts

    def switch_context(self, name: str) -> None:
        """
        切換 context，成功後所有既有 ElementHandle 失效。

        Raises:
            ContextNotFoundError: name 不在 contexts() 之中
        """
        available = self.contexts()
        if name not in available:
            raise ContextNotFoundError(name, available)
        logger.info(f"切換 context: {self._context} -> {name}")
        self.driver.switch_to.context(name)
        self._context = name
        self.invalidate()

    def switch_to_native(self) -> None:
        """切換到 Native context"""
        self.switch_context(self.native_context)

    def _webviews(self) -> list[str]:
        return [c for c in self._driver_contexts() if "WEBVIEW" in c.upper()]

    def switch_to_webview(self, index: int = 0) -> str:
        """
        切換到 WebView context。

        Args:
            index: 若有多個 WebView，指定 index (0-based，依 driver 回報順序)

        Returns:
            切換到的 context 名稱
        """
        webviews = self._webviews()
        if index >= len(webviews):
            raise ContextNotFoundError(f"WEBVIEW[{index}]", set(webviews))
        target = webviews[index]
        self.switch_context(target)
        return target

    def wait_for_webview(self, timeout: float | None = None) -> str:
        """等待 WebView context 出現後切換"""
        timeout = self.timeout if timeout is None else timeout
        logger.info(f"等待 WebView 出現 (最多 {timeout}s)...")
        webviews = self.wait_until(
            self._webviews, timeout, message=f"等待 WebView 逾時 ({timeout}s)",
        )
        self.switch_context(webviews[0])
        return webviews[0]

    # ── 導航與頁面狀態 ──

    def open_url(self, url: str) -> None:
        """導航到 url（WebView / 瀏覽器），既有 ElementHandle 失效"""
        self._ensure_open()
        logger.info(f"開啟網址: {url}")
        self.driver.get(url)
        self.invalidate()

    @property
    def page_source(self) -> str:
        self._ensure_open()
        return self.driver.page_source

    def screenshot(self, name: str) -> str:
        """截圖並回傳檔案路徑"""
        self._ensure_open()
        return take_screenshot(self.driver, name)

    # ── 釋放 ──

    def teardown(self, raise_errors: bool = True) -> None:
        """
        釋放遠端連線，重複呼叫不會再次關閉。

        先把 context 切回 Native，再 quit driver。
        失敗一律記錄 log；raise_errors=False 時不拋出，
        避免 cleanup 錯誤蓋掉原本的測試失敗。

        Raises:
            SessionTeardownError: quit 失敗且 raise_errors=True
        """
        if self._closed:
            return
        self._closed = True
        self.invalidate()

        if self._context != self.native_context:
            try:
                self.driver.switch_to.context(self.native_context)
            except Exception as e:
                logger.warning(f"切回 {self.native_context} 失敗: {e}")
        self._context = self.native_context

        try:
            self.driver.quit()
        except Exception as e:
            logger.error(f"關閉 Session 失敗: {e}")
            if raise_errors:
                raise SessionTeardownError(e) from e
            return
        logger.info("Session 已關閉")

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.teardown(raise_errors=exc_type is None)
        return False
