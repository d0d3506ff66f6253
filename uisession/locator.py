"""
Locator — 元素定位描述

不可變的 (strategy, value) 值物件，描述「怎麼找到一個元素」，
不持有任何遠端參照。同一個 Locator 可以被反覆解析成新的 ElementHandle。

用法：
    from uisession.locator import Locator, Strategy

    LOGIN_BTN = Locator.by_id("com.example.app:id/btn_login")
    MENU = Locator(Strategy.ACCESSIBILITY_ID, "menu")
    SUBMIT = Locator("css selector", "button[type=submit]")

    driver.find_elements(*LOGIN_BTN.as_tuple())
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from appium.webdriver.common.appiumby import AppiumBy


class Strategy(str, Enum):
    """定位策略，值即 WebDriver 協定的 "using" 字串"""

    ID = AppiumBy.ID
    NAME = AppiumBy.NAME
    CLASS_NAME = AppiumBy.CLASS_NAME
    CSS_SELECTOR = AppiumBy.CSS_SELECTOR
    XPATH = AppiumBy.XPATH
    ACCESSIBILITY_ID = AppiumBy.ACCESSIBILITY_ID
    LINK_TEXT = AppiumBy.LINK_TEXT
    PARTIAL_LINK_TEXT = AppiumBy.PARTIAL_LINK_TEXT


@dataclass(frozen=True)
class Locator:
    """元素定位器，以 (strategy, value) 判斷相等"""

    strategy: Strategy
    value: str

    def __post_init__(self):
        # 接受 "id" / "xpath" 這類字串，統一轉成 Strategy
        object.__setattr__(self, "strategy", Strategy(self.strategy))
        if not self.value:
            raise ValueError("Locator value 不可為空")

    def as_tuple(self) -> tuple[str, str]:
        """轉成 driver.find_element(*locator) 需要的 (by, value)"""
        return (self.strategy.value, self.value)

    def __str__(self) -> str:
        return f"{self.strategy.name}={self.value!r}"

    # ── 建構捷徑 ──

    @classmethod
    def by_id(cls, value: str) -> "Locator":
        return cls(Strategy.ID, value)

    @classmethod
    def by_name(cls, value: str) -> "Locator":
        return cls(Strategy.NAME, value)

    @classmethod
    def by_class_name(cls, value: str) -> "Locator":
        return cls(Strategy.CLASS_NAME, value)

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls(Strategy.CSS_SELECTOR, value)

    @classmethod
    def xpath(cls, value: str) -> "Locator":
        return cls(Strategy.XPATH, value)

    @classmethod
    def accessibility_id(cls, value: str) -> "Locator":
        return cls(Strategy.ACCESSIBILITY_ID, value)

    @classmethod
    def link_text(cls, value: str) -> "Locator":
        return cls(Strategy.LINK_TEXT, value)

    @classmethod
    def partial_link_text(cls, value: str) -> "Locator":
        return cls(Strategy.PARTIAL_LINK_TEXT, value)
