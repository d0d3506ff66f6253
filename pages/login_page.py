"""
登入頁面 Page Object（範例）

示範如何使用 BasePage 建立一個 Page Object。
請依照你的 App 實際 UI 修改 locator。
"""

from uisession.base_page import BasePage
from uisession.locator import Locator
from uisession.session import Session
from utils.allure_helper import allure_step


class LoginPage(BasePage):
    """登入頁面"""

    def __init__(self, session: Session, timeout: float | None = None):
        # 請依照實際 App 的元素 ID / XPath 修改
        super().__init__(session, {
            "username": Locator.by_id("com.example.app:id/username"),
            "password": Locator.by_id("com.example.app:id/password"),
            "login_button": Locator.by_id("com.example.app:id/btn_login"),
            "error_message": Locator.by_id("com.example.app:id/error_message"),
        }, timeout=timeout)

    # ── 頁面操作 ──

    @allure_step("登入: {username}")
    def login(self, username: str, password: str) -> None:
        """
        完整的登入流程。

        只等待帳號欄位出現；同一畫面的密碼欄位與登入按鈕直接解析。
        登入後的結果由呼叫端自行驗證。
        """
        self.element("username").type(username)
        self.find("password").type(password)
        self.find("login_button").click()

    def tap_login(self) -> None:
        self.tap("login_button")

    # ── 頁面驗證 ──

    def get_error_message(self) -> str:
        return self.text_of("error_message")

    def is_login_page_displayed(self) -> bool:
        return self.is_displayed("login_button")
