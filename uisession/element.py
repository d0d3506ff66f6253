"""
ElementHandle — 遠端元素的租用參照

由 Session.resolve() / Session.wait_for() 產生，只在下一次 UI 變動前有效。
context 切換或頁面導航後再使用會拋出 StaleElementError。

Handle 本身不做任何等待：click / type / clear 前若元素不可見或不可用，
直接拋出例外，呼叫端應先用 Session.wait_for(..., visible=True) 同步。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

from uisession.exceptions import (
    ElementNotClickableError,
    ElementNotVisibleError,
    StaleElementError,
)
from uisession.locator import Locator
from utils.logger import logger

if TYPE_CHECKING:
    from uisession.session import Session


class ElementHandle:
    """已解析的遠端元素"""

    def __init__(self, session: "Session", element: WebElement,
                 locator: Locator, generation: int):
        self._session = session
        self._element = element
        self._locator = locator
        self._generation = generation

    @property
    def locator(self) -> Locator:
        return self._locator

    @property
    def generation(self) -> int:
        return self._generation

    def __repr__(self) -> str:
        return f"<ElementHandle {self._locator} gen={self._generation}>"

    # ── 內部 ──

    def _live(self) -> WebElement:
        """確認 handle 仍有效，回傳底層 WebElement"""
        self._session.check_handle(self)
        return self._element

    def _call(self, fn):
        """在有效的 WebElement 上執行 fn，遠端回報 stale 時轉成 StaleElementError"""
        element = self._live()
        try:
            return fn(element)
        except StaleElementReferenceException as e:
            raise StaleElementError(self._locator) from e

    def _require_visible(self) -> None:
        if not self.is_visible():
            raise ElementNotVisibleError(self._locator)

    # ── 狀態查詢 ──

    def is_visible(self) -> bool:
        return bool(self._call(lambda el: el.is_displayed()))

    def is_enabled(self) -> bool:
        return bool(self._call(lambda el: el.is_enabled()))

    def text(self) -> str:
        return self._call(lambda el: el.text)

    def attribute(self, name: str) -> str | None:
        """取得屬性值，屬性不存在時回傳 None"""
        return self._call(lambda el: el.get_attribute(name))

    # ── 操作 ──

    def click(self) -> None:
        """點擊元素（須可見且可用）"""
        self._require_visible()
        if not self.is_enabled():
            raise ElementNotClickableError(self._locator)
        logger.info(f"點擊元素: {self._locator}")
        self._call(lambda el: el.click())

    def type(self, text: str) -> None:
        """輸入文字（不會先清除，需要時先呼叫 clear()）"""
        self._require_visible()
        logger.info(f"輸入文字: '{text}' -> {self._locator}")
        self._call(lambda el: el.send_keys(text))

    def clear(self) -> None:
        """清除輸入內容"""
        self._require_visible()
        self._call(lambda el: el.clear())

    # ── 範圍查找 ──

    def find(self, locator: Locator) -> "ElementHandle":
        """在此元素底下查找子元素"""
        return self._session.resolve(locator, within=self)
