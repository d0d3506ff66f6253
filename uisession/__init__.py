"""
uisession — UI 自動化 Session 抽象

統一匯出所有核心元件，方便外部 import。

用法：
    from uisession import Locator, Session, BasePage, WaitPolicy
    from uisession import open_session, SessionManager
    from uisession import ElementNotFoundError, WaitTimeoutError
"""

from uisession.base_page import BasePage
from uisession.driver_manager import SessionManager, open_session
from uisession.element import ElementHandle
from uisession.exceptions import (
    ContextNotFoundError,
    DriverConnectionError,
    DriverError,
    ElementError,
    ElementNotClickableError,
    ElementNotFoundError,
    ElementNotVisibleError,
    PageError,
    PublishError,
    SessionClosedError,
    SessionError,
    SessionNotStartedError,
    SessionTeardownError,
    StaleElementError,
    UIAutomationError,
    UnknownFieldError,
    UnsupportedOperationError,
    WaitTimeoutError,
)
from uisession.locator import Locator, Strategy
from uisession.session import Session
from uisession.waits import WaitPolicy, retry, wait_for

__all__ = [
    # Locator / Wait
    "Locator",
    "Strategy",
    "WaitPolicy",
    "wait_for",
    "retry",
    # Session / Element / Page
    "Session",
    "SessionManager",
    "open_session",
    "ElementHandle",
    "BasePage",
    # Exceptions
    "UIAutomationError",
    "DriverError",
    "DriverConnectionError",
    "SessionNotStartedError",
    "SessionError",
    "SessionClosedError",
    "SessionTeardownError",
    "ContextNotFoundError",
    "ElementError",
    "ElementNotFoundError",
    "StaleElementError",
    "ElementNotVisibleError",
    "ElementNotClickableError",
    "PageError",
    "UnknownFieldError",
    "WaitTimeoutError",
    "UnsupportedOperationError",
    "PublishError",
]
