from utils.logger import logger
from utils.screenshot import take_screenshot

__all__ = [
    "logger",
    "take_screenshot",
]
