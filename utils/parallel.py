"""
多裝置平行測試設定

搭配 pytest-xdist 在多台裝置上平行執行測試。
每個 worker 使用不同的 server port 和裝置，各自擁有獨立的 Session。
"""

import json
from pathlib import Path

from config.config import Config
from utils.logger import logger

# 裝置清單設定檔路徑
DEVICES_FILE = Path(__file__).resolve().parent.parent / "config" / "devices.json"


def worker_index(worker_id: str) -> int | None:
    """gw0 -> 0, gw1 -> 1；非平行模式 (master) 回傳 None"""
    if worker_id == "master":
        return None
    if not worker_id.startswith("gw") or not worker_id[2:].isdigit():
        raise ValueError(f"無法辨識的 worker id: {worker_id}")
    return int(worker_id[2:])


def get_device_config(worker_id: str, platform: str | None = None,
                      devices_file: Path = DEVICES_FILE) -> dict:
    """
    根據 pytest-xdist 的 worker_id 取得對應的裝置設定。

    Args:
        worker_id: pytest-xdist worker ID (如 "gw0", "gw1")，非平行模式為 "master"
        platform: 回退使用 <platform>_caps.json 時的平台
        devices_file: 裝置清單 JSON

    Returns:
        該 worker 對應的 capabilities dict
    """
    idx = worker_index(worker_id)
    if idx is None or (platform or Config.PLATFORM) == "chrome":
        return Config.load_caps(platform)

    if not devices_file.exists():
        logger.warning(f"找不到 {devices_file}，使用預設 caps")
        return Config.load_caps(platform)

    with open(devices_file, "r", encoding="utf-8") as f:
        devices = json.load(f)

    if idx >= len(devices):
        raise IndexError(
            f"Worker {worker_id} 沒有對應的裝置設定 "
            f"(共 {len(devices)} 台裝置)"
        )

    device = devices[idx]
    logger.info(f"[{worker_id}] 使用裝置: {device.get('appium:deviceName', 'unknown')}")
    return device


def get_server_port(worker_id: str, base_port: int | None = None) -> int:
    """
    根據 worker_id 計算 server port。

    gw0 -> 4723, gw1 -> 4724, gw2 -> 4725 ...
    """
    base_port = base_port or Config.APPIUM_PORT
    idx = worker_index(worker_id)
    return base_port if idx is None else base_port + idx


def get_server_url(worker_id: str, platform: str | None = None) -> str:
    """worker 專屬的 server URL；瀏覽器平台共用同一個 Grid"""
    platform = platform or Config.PLATFORM
    if platform == "chrome":
        return Config.remote_url(platform)
    return f"http://{Config.APPIUM_HOST}:{get_server_port(worker_id)}"
