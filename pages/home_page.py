"""
首頁 Page Object（範例）

示範如何建立第二個 Page Object，並從登入後導航到首頁。
請依照你的 App 實際 UI 修改 locator。
"""

from uisession.base_page import BasePage
from uisession.locator import Locator
from uisession.session import Session


class HomePage(BasePage):
    """首頁"""

    def __init__(self, session: Session, timeout: float | None = None):
        super().__init__(session, {
            "welcome_text": Locator.by_id("com.example.app:id/welcome_text"),
            "menu_button": Locator.accessibility_id("menu"),
            "logout_button": Locator.by_id("com.example.app:id/btn_logout"),
            "help_button": Locator.by_id("com.example.app:id/btn_help"),
        }, timeout=timeout)

    def get_welcome_text(self) -> str:
        return self.text_of("welcome_text")

    def open_menu(self) -> "HomePage":
        self.tap("menu_button")
        return self

    def tap_logout(self) -> None:
        self.open_menu()
        self.tap("logout_button")

    def open_help(self) -> None:
        self.tap("help_button")

    def is_home_page_displayed(self) -> bool:
        return self.is_displayed("welcome_text")
