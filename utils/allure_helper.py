"""
Allure 報告整合輔助
封裝 Allure 常用的步驟標記與失敗附件。
"""

import functools

import allure

from utils.logger import logger
from utils.screenshot import save_screenshot_png


def allure_step(title: str):
    """
    裝飾器：將 Page 操作標記為 Allure step。

    title 可使用函式參數做格式化，例如 "登入: {username}"。

    用法：
        @allure_step("輸入帳號密碼並登入")
        def login(self, user, pwd): ...
    """
    def decorator(func):
        stepped = allure.step(title)(func)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"[step] {func.__qualname__}")
            return stepped(*args, **kwargs)
        return wrapper
    return decorator


def attach_text(text: str, name: str = "log") -> None:
    """將文字附加到 Allure 報告"""
    allure.attach(text, name=name, attachment_type=allure.attachment_type.TEXT)


def attach_failure(session, name: str) -> None:
    """
    截圖存檔，並將目前畫面與頁面結構附加到 Allure 報告。

    遠端已斷線時只記錄 log，不讓附件失敗蓋掉原本的測試失敗。
    """
    if session is None or session.closed:
        return
    try:
        png = session.driver.get_screenshot_as_png()
        save_screenshot_png(png, f"FAIL_{name}")
        source = session.page_source
    except Exception as e:
        logger.warning(f"無法擷取失敗附件: {e}")
        return
    allure.attach(png, name=f"失敗截圖: {name}",
                  attachment_type=allure.attachment_type.PNG)
    attach_text(source, f"頁面結構: {name}")
