"""
設定管理模組
統一管理 automation server、等待時間、裝置能力 (capabilities) 等設定。
支援透過環境變數覆蓋預設值，方便 CI/CD 整合。
支援 capabilities 結構驗證，提前發現設定錯誤。
"""

import json
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_DIR = Path(__file__).resolve().parent

# capabilities 必填欄位定義
_REQUIRED_CAPS = {
    "android": ["appium:deviceName", "appium:app", "platformName"],
    "ios": ["appium:deviceName", "appium:app", "platformName"],
    "chrome": ["browserName"],
}

# capabilities 建議欄位（缺少時發出警告）
_RECOMMENDED_CAPS = {
    "android": ["appium:automationName", "appium:appPackage", "appium:appActivity"],
    "ios": ["appium:automationName", "appium:bundleId"],
    "chrome": ["goog:chromeOptions"],
}

SUPPORTED_PLATFORMS = tuple(_REQUIRED_CAPS)


class ConfigValidationError(Exception):
    """Capabilities 設定驗證失敗"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        msg = "Capabilities 驗證失敗:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class Config:
    """框架全域設定"""

    # Appium Server
    APPIUM_HOST = os.getenv("APPIUM_HOST", "127.0.0.1")
    APPIUM_PORT = int(os.getenv("APPIUM_PORT", "4723"))

    # Selenium Grid（chrome 平台使用）
    SELENIUM_REMOTE_URL = os.getenv("SELENIUM_REMOTE_URL", "http://127.0.0.1:4444")

    # 超時設定 (秒)
    # implicit wait 維持 0：等待一律交給 WaitPolicy，find_elements 才能立即回傳
    IMPLICIT_WAIT = float(os.getenv("IMPLICIT_WAIT", "0"))
    EXPLICIT_WAIT = float(os.getenv("EXPLICIT_WAIT", "15"))
    POLL_INTERVAL = float(os.getenv("POLL_INTERVAL", "0.5"))

    # Hybrid App
    NATIVE_CONTEXT = os.getenv("NATIVE_CONTEXT", "NATIVE_APP")

    # 截圖與報告
    SCREENSHOT_DIR = BASE_DIR / "screenshots"
    REPORT_DIR = BASE_DIR / "reports"

    # 測試結果收集端（空字串 = 不推送）
    RESULTS_ENDPOINT = os.getenv("RESULTS_ENDPOINT", "")
    RESULTS_TOKEN = os.getenv("RESULTS_TOKEN", "")

    # 平台
    PLATFORM = os.getenv("PLATFORM", "android").lower()

    @classmethod
    def appium_server_url(cls) -> str:
        return f"http://{cls.APPIUM_HOST}:{cls.APPIUM_PORT}"

    @classmethod
    def remote_url(cls, platform: str | None = None) -> str:
        """依平台回傳遠端 endpoint：瀏覽器走 Selenium Grid，其餘走 Appium"""
        platform = platform or cls.PLATFORM
        if platform == "chrome":
            return cls.SELENIUM_REMOTE_URL
        return cls.appium_server_url()

    @classmethod
    def load_caps(cls, platform: str | None = None, validate: bool = True) -> dict:
        """
        從 JSON 檔載入 desired capabilities。

        Args:
            platform: 'android'、'ios' 或 'chrome'，預設讀取 Config.PLATFORM
            validate: 是否驗證必填欄位（預設 True）

        Returns:
            capabilities dict

        Raises:
            FileNotFoundError: 設定檔不存在
            ConfigValidationError: 必填欄位缺失
        """
        platform = platform or cls.PLATFORM
        caps_file = CONFIG_DIR / f"{platform}_caps.json"
        if not caps_file.exists():
            raise FileNotFoundError(f"找不到 capabilities 設定檔: {caps_file}")
        with open(caps_file, "r", encoding="utf-8") as f:
            caps = json.load(f)

        if validate:
            from utils.logger import logger

            for warning in cls.validate_caps(caps, platform):
                logger.warning(f"[{platform}] {warning}")

        return caps

    @classmethod
    def validate_caps(cls, caps: dict, platform: str) -> list[str]:
        """
        驗證 capabilities 結構。

        Args:
            caps: capabilities dict
            platform: 'android'、'ios' 或 'chrome'

        Returns:
            警告訊息列表

        Raises:
            ConfigValidationError: 必填欄位缺失或平台不支援時拋出
        """
        if platform not in _REQUIRED_CAPS:
            raise ConfigValidationError([f"不支援的平台: {platform}"])

        errors: list[str] = []
        warnings: list[str] = []

        for key in _REQUIRED_CAPS[platform]:
            if key not in caps:
                errors.append(f"缺少必填欄位: {key}")

        for key in _RECOMMENDED_CAPS.get(platform, []):
            if key not in caps:
                warnings.append(f"建議填寫欄位: {key}")

        if errors:
            raise ConfigValidationError(errors)

        return warnings
