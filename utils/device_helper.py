"""
裝置控制工具
螢幕旋轉、視窗大小、返回鍵等裝置層級操作。

driver 不支援的操作一律拋出 UnsupportedOperationError，
不吞掉例外，由測試決定要 skip 還是判定失敗。
"""

from selenium.common.exceptions import (
    UnknownMethodException,
    WebDriverException,
)

from uisession.exceptions import UnsupportedOperationError
from uisession.session import Session
from utils.logger import logger

ORIENTATIONS = ("PORTRAIT", "LANDSCAPE")


class DeviceHelper:
    """裝置層級操作（綁定一個 Session）"""

    def __init__(self, session: Session):
        self.session = session

    @property
    def driver(self):
        return self.session.driver

    def _unsupported(self, operation: str, error: Exception):
        logger.warning(f"不支援的操作 {operation}: {error}")
        return UnsupportedOperationError(operation, error)

    # ── 螢幕旋轉 ──

    def set_orientation(self, orientation: str) -> None:
        """
        設定螢幕方向，成功後既有 ElementHandle 失效。

        Raises:
            ValueError: orientation 不是 PORTRAIT / LANDSCAPE
            UnsupportedOperationError: driver 不支援旋轉
        """
        orientation = orientation.upper()
        if orientation not in ORIENTATIONS:
            raise ValueError(f"不支援的螢幕方向: {orientation}")
        logger.info(f"旋轉螢幕: {orientation}")
        try:
            self.driver.orientation = orientation
        except (UnknownMethodException, AttributeError) as e:
            raise self._unsupported("set_orientation", e) from e
        self.session.invalidate()

    def rotate_landscape(self) -> None:
        self.set_orientation("LANDSCAPE")

    def rotate_portrait(self) -> None:
        self.set_orientation("PORTRAIT")

    def get_orientation(self) -> str:
        """取得目前螢幕方向"""
        try:
            return self.driver.orientation
        except (UnknownMethodException, AttributeError) as e:
            raise self._unsupported("get_orientation", e) from e

    # ── 視窗大小 ──

    def get_window_size(self) -> dict:
        return self.driver.get_window_size()

    def set_window_size(self, width: int, height: int) -> None:
        """
        調整視窗大小（瀏覽器 / 桌面）。行動裝置通常不支援。

        Raises:
            UnsupportedOperationError: driver 不支援調整大小
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"視窗大小必須為正數: {width}x{height}")
        logger.info(f"調整視窗大小: {width}x{height}")
        try:
            self.driver.set_window_size(width, height)
        except UnknownMethodException as e:
            raise self._unsupported("set_window_size", e) from e
        except WebDriverException as e:
            if "not implemented" in str(e).lower():
                raise self._unsupported("set_window_size", e) from e
            raise
        self.session.invalidate()

    # ── 系統按鍵 ──

    def press_back(self) -> None:
        """按返回鍵（頁面會改變，既有 ElementHandle 失效）"""
        logger.info("按下返回鍵")
        self.driver.back()
        self.session.invalidate()

    # ── 裝置資訊 ──

    def get_device_info(self) -> dict:
        """取得裝置基本資訊"""
        caps = self.driver.capabilities
        size = self.get_window_size()
        info = {
            "platform": caps.get("platformName", ""),
            "device_name": caps.get("deviceName", caps.get("browserName", "")),
            "os_version": caps.get("platformVersion", caps.get("browserVersion", "")),
            "screen_width": size["width"],
            "screen_height": size["height"],
            "context": self.session.current_context,
        }
        logger.info(f"裝置資訊: {info}")
        return info
