"""
說明中心 Page Object（Hybrid 範例）

說明中心由 App 內嵌的 WebView 呈現，欄位使用 CSS selector，
必須先切換到 WebView context 才能查找。
"""

from uisession.base_page import BasePage
from uisession.locator import Locator
from uisession.session import Session
from utils.allure_helper import allure_step


class HybridHelpPage(BasePage):
    """WebView 內的說明中心"""

    def __init__(self, session: Session, timeout: float | None = None):
        super().__init__(session, {
            "title": Locator.css("h1.help-title"),
            "search": Locator.css("input[name=q]"),
            "search_button": Locator.css("button[type=submit]"),
            "results": Locator.css("ul.results"),
            "result_item": Locator.css("li.result"),
        }, timeout=timeout)

    def enter(self, timeout: float | None = None) -> str:
        """等待 WebView 掛載並切換進去，回傳 context 名稱"""
        return self.session.wait_for_webview(timeout)

    def leave(self) -> None:
        """切回 Native context"""
        self.session.switch_to_native()

    def get_title(self) -> str:
        return self.text_of("title")

    @allure_step("說明中心搜尋: {keyword}")
    def search(self, keyword: str) -> list[str]:
        """搜尋並回傳結果標題"""
        self.fill("search", keyword)
        self.tap("search_button")
        results = self.element("results", visible=True)
        return [
            item.text()
            for item in self.session.resolve_all(
                self.locator("result_item"), within=results,
            )
        ]

    def read_title_and_return(self) -> str:
        """進入 WebView 讀取標題後，無論成功與否都切回 Native"""
        self.enter()
        try:
            return self.get_title()
        finally:
            self.leave()
