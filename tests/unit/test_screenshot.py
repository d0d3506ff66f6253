"""
utils.screenshot 單元測試
驗證截圖目錄建立、檔名生成與 driver 呼叫。
"""

from unittest.mock import MagicMock, patch

import pytest

from utils.screenshot import safe_filename, save_screenshot_png, take_screenshot


@pytest.mark.unit
class TestSafeFilename:
    """safe_filename"""

    @pytest.mark.unit
    def test_replaces_node_id_characters(self):
        assert safe_filename("tests/test_login.py::TestLogin::test_ok[android]") == (
            "tests_test_login.py_TestLogin_test_ok_android"
        )

    @pytest.mark.unit
    def test_empty_name_has_fallback(self):
        assert safe_filename("///") == "screenshot"


@pytest.mark.unit
class TestTakeScreenshot:
    """take_screenshot"""

    @pytest.mark.unit
    def test_creates_directory_and_saves(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PYTEST_XDIST_WORKER", "gw1")
        screenshot_dir = tmp_path / "shots" / "nested"
        driver = MagicMock()

        with patch("utils.screenshot.Config") as mock_config, \
             patch("utils.screenshot.datetime") as mock_datetime:
            mock_config.SCREENSHOT_DIR = screenshot_dir
            mock_datetime.now.return_value.strftime.return_value = "20250101_120000"
            result = take_screenshot(driver, "FAIL_test_login[android]")

        expected = screenshot_dir / "FAIL_test_login_android_gw1_20250101_120000.png"
        assert screenshot_dir.exists()
        assert result == str(expected)
        driver.save_screenshot.assert_called_once_with(str(expected))

    @pytest.mark.unit
    def test_save_png_bytes(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PYTEST_XDIST_WORKER", "master")

        with patch("utils.screenshot.Config") as mock_config, \
             patch("utils.screenshot.datetime") as mock_datetime:
            mock_config.SCREENSHOT_DIR = tmp_path
            mock_datetime.now.return_value.strftime.return_value = "20250101_120000"
            result = save_screenshot_png(b"\x89PNG", "FAIL_test_x")

        expected = tmp_path / "FAIL_test_x_master_20250101_120000.png"
        assert result == str(expected)
        assert expected.read_bytes() == b"\x89PNG"
