"""
Page Object 基底類別

所有 Page Object 都繼承此類。欄位與 locator 的對應表在建構子中明確建立，
測試程式只呼叫語意化的操作（login、submit...），不直接接觸 locator。
所有等待與解析都委派給 Session。

用法：
    class SearchPage(BasePage):
        def __init__(self, session):
            super().__init__(session, {
                "query": Locator.by_id("com.app:id/search"),
                "submit": Locator.accessibility_id("search"),
            })

        def search(self, keyword: str) -> None:
            self.fill("query", keyword)
            self.tap("submit")
"""

from collections.abc import Mapping
from types import MappingProxyType

from uisession.element import ElementHandle
from uisession.exceptions import UnknownFieldError, WaitTimeoutError
from uisession.locator import Locator
from uisession.session import Session


class BasePage:
    """
    Page Object 基底類別

    提供：
    - 欄位名稱 → Locator 對照
    - 以欄位名稱等待 / 解析元素
    - 點擊、輸入、讀取文字等組合操作
    """

    def __init__(self, session: Session, fields: Mapping[str, Locator],
                 timeout: float | None = None):
        self.session = session
        self.timeout = timeout
        self._fields = dict(fields)

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def fields(self) -> Mapping[str, Locator]:
        """唯讀的欄位對照表"""
        return MappingProxyType(self._fields)

    def locator(self, field: str) -> Locator:
        try:
            return self._fields[field]
        except KeyError:
            raise UnknownFieldError(self.name, field) from None

    # ── 元素查找 ──

    def element(self, field: str, timeout: float | None = None,
                visible: bool = False) -> ElementHandle:
        """等待欄位元素出現並回傳"""
        return self.session.wait_for(
            self.locator(field),
            timeout=timeout if timeout is not None else self.timeout,
            visible=visible,
        )

    def find(self, field: str, within: ElementHandle | None = None) -> ElementHandle:
        """直接解析欄位元素，不等待"""
        return self.session.resolve(self.locator(field), within=within)

    def is_displayed(self, field: str, timeout: float = 3) -> bool:
        """判斷欄位元素是否在 timeout 內變為可見（不拋出逾時例外）"""
        try:
            self.element(field, timeout=timeout, visible=True)
            return True
        except WaitTimeoutError:
            return False

    # ── 組合操作 ──

    def tap(self, field: str) -> None:
        """等待元素可見後點擊"""
        self.element(field, visible=True).click()

    def fill(self, field: str, text: str) -> None:
        """等待元素可見，清除後輸入文字"""
        handle = self.element(field, visible=True)
        handle.clear()
        handle.type(text)

    def text_of(self, field: str) -> str:
        """取得欄位元素文字"""
        return self.element(field).text()
