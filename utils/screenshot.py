"""
截圖工具
測試失敗時自動截圖，方便 debug。
"""

import re
from datetime import datetime
from pathlib import Path

from config.config import Config
from utils.logger import current_worker, logger

_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


def safe_filename(name: str) -> str:
    """把 pytest node id 之類的字串轉成可用的檔名"""
    return _UNSAFE_CHARS.sub("_", name).strip("_") or "screenshot"


def _screenshot_path(name: str) -> Path:
    Config.SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"{safe_filename(name)}_{current_worker()}_{timestamp}.png"
    return Config.SCREENSHOT_DIR / filename


def take_screenshot(driver, name: str) -> str:
    """
    擷取螢幕截圖並儲存到 screenshots 目錄。

    Args:
        driver: WebDriver 實例
        name: 截圖名稱（不含副檔名，不安全字元會被替換）

    Returns:
        截圖檔案的完整路徑
    """
    filepath = _screenshot_path(name)
    driver.save_screenshot(str(filepath))
    logger.info(f"截圖已儲存: {filepath}")
    return str(filepath)


def save_screenshot_png(png: bytes, name: str) -> str:
    """把已取得的 PNG bytes 寫入 screenshots 目錄，不再向遠端要一次截圖"""
    filepath = _screenshot_path(name)
    filepath.write_bytes(png)
    logger.info(f"截圖已儲存: {filepath}")
    return str(filepath)
