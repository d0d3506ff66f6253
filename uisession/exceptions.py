"""
自訂 Exception 體系

統一的錯誤處理階層，讓每種失敗都有明確的分類與訊息。
上層可以 catch 大類別 (如 UIAutomationError)，
也可以精準 catch 子類別 (如 ElementNotFoundError)。

Exception 樹：
    UIAutomationError
    ├── DriverError
    │   ├── DriverConnectionError
    │   └── SessionNotStartedError
    ├── SessionError
    │   ├── SessionClosedError
    │   ├── SessionTeardownError
    │   └── ContextNotFoundError
    ├── ElementError
    │   ├── ElementNotFoundError      (WaitPolicy 內會重試)
    │   ├── StaleElementError         (不重試，代表呼叫順序錯誤)
    │   ├── ElementNotVisibleError
    │   └── ElementNotClickableError
    ├── PageError
    │   └── UnknownFieldError
    ├── WaitTimeoutError              (同時是內建 TimeoutError)
    ├── UnsupportedOperationError
    └── PublishError
"""


class UIAutomationError(Exception):
    """框架所有例外的基底，catch 這個就能攔截一切框架錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── Driver 相關 ──

class DriverError(UIAutomationError):
    """Driver 相關錯誤"""


class DriverConnectionError(DriverError):
    """無法連接到遠端 automation server"""

    def __init__(self, url: str = "", original: Exception | None = None):
        self.original = original
        msg = f"無法連接到 automation server: {url}"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg, context={"url": url})


class SessionNotStartedError(DriverError):
    """目前執行緒尚未建立 Session 就被使用"""

    def __init__(self, message: str = "Session 尚未建立，請先呼叫 start_session()"):
        super().__init__(message)


# ── Session 相關 ──

class SessionError(UIAutomationError):
    """Session 狀態相關錯誤"""


class SessionClosedError(SessionError):
    """Session 已 teardown 後仍被使用"""

    def __init__(self, message: str = "Session 已關閉"):
        super().__init__(message)


class SessionTeardownError(SessionError):
    """釋放遠端連線失敗"""

    def __init__(self, original: Exception | None = None):
        self.original = original
        msg = "關閉 Session 失敗"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg)


class ContextNotFoundError(SessionError):
    """要切換的 context 不存在"""

    def __init__(self, name: str = "", available: set | None = None):
        available = set(available or ())
        super().__init__(
            f"找不到 context: {name} (可用: {sorted(available)})",
            context={"name": name, "available": available},
        )


# ── Element 相關 ──

class ElementError(UIAutomationError):
    """元素查找與操作相關錯誤"""


class ElementNotFoundError(ElementError):
    """locator 沒有匹配任何元素"""

    def __init__(self, locator=None, timeout: float = 0):
        msg = f"找不到元素: {locator}"
        if timeout:
            msg += f" (等待 {timeout}s)"
        super().__init__(msg, context={"locator": locator, "timeout": timeout})


class StaleElementError(ElementError):
    """元素參照已失效（context 切換、頁面導航或 DOM 重繪）"""

    def __init__(self, locator=None):
        super().__init__(f"元素參照已失效: {locator}", context={"locator": locator})


class ElementNotVisibleError(ElementError):
    """元素不可見"""

    def __init__(self, locator=None):
        super().__init__(f"元素不可見: {locator}", context={"locator": locator})


class ElementNotClickableError(ElementError):
    """元素無法點擊"""

    def __init__(self, locator=None):
        super().__init__(f"元素無法點擊: {locator}", context={"locator": locator})


# ── Page 相關 ──

class PageError(UIAutomationError):
    """頁面操作相關錯誤"""


class UnknownFieldError(PageError):
    """Page 沒有定義此欄位"""

    def __init__(self, page_name: str = "", field: str = ""):
        super().__init__(
            f"{page_name} 沒有欄位: {field}",
            context={"page_name": page_name, "field": field},
        )


# ── Wait 相關 ──

class WaitTimeoutError(UIAutomationError, TimeoutError):
    """等待逾時，該次等待視為最終失敗"""

    def __init__(self, timeout: float = 0, message: str = "",
                 attempts: int = 0, last_exception: Exception | None = None):
        self.timeout = timeout
        self.attempts = attempts
        self.last_exception = last_exception
        msg = message or f"等待逾時 ({timeout}s)"
        if last_exception:
            msg += f" | 最後的例外: {last_exception}"
        super().__init__(
            msg, context={"timeout": timeout, "attempts": attempts},
        )


# ── 其他 ──

class UnsupportedOperationError(UIAutomationError):
    """目前的 driver / 裝置不支援此操作"""

    def __init__(self, operation: str = "", original: Exception | None = None):
        self.original = original
        msg = f"不支援的操作: {operation}"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg, context={"operation": operation})


class PublishError(UIAutomationError):
    """推送測試結果到外部收集端失敗"""

    def __init__(self, endpoint: str = "", status_code: int | None = None,
                 reason: str = ""):
        msg = f"推送結果失敗: {endpoint}"
        if status_code is not None:
            msg += f" (HTTP {status_code})"
        if reason:
            msg += f" {reason}"
        super().__init__(
            msg, context={"endpoint": endpoint, "status_code": status_code},
        )
