"""
測試結果推送
把一次執行的結果 (artifact) 推送到外部收集端，並取得收據 (acknowledgement)。
收集端只需提供：POST JSON → 回傳 2xx 與 {"id": "..."}。

用法：
    publisher = ResultPublisher("https://results.example.com/api/runs", token="...")
    ack = publisher.push("nightly-android", {"passed": 12, "failed": 1})
    print(ack.artifact_id)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import requests

from config.config import Config
from uisession.exceptions import PublishError
from uisession.waits import retry
from utils.logger import current_worker, logger


@dataclass
class Acknowledgement:
    """收集端回傳的收據"""
    artifact_id: str
    status_code: int
    received: dict = field(default_factory=dict)


class ResultPublisher:
    """以 HTTP POST 推送測試結果"""

    def __init__(self, endpoint: str | None = None, token: str | None = None,
                 timeout: int = 30, max_attempts: int = 3, retry_delay: float = 1.0):
        self.endpoint = endpoint if endpoint is not None else Config.RESULTS_ENDPOINT
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        token = token if token is not None else Config.RESULTS_TOKEN
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint)

    def build_artifact(self, name: str, payload: dict) -> dict:
        return {
            "name": name,
            "worker": current_worker(),
            "created_at": datetime.now(timezone.utc).isoformat(),
            "payload": payload,
        }

    def push(self, name: str, payload: dict) -> Acknowledgement:
        """
        推送 artifact 並回傳收據。

        連線錯誤與逾時會重試；HTTP 錯誤或收據格式錯誤不重試。

        Raises:
            PublishError: 未設定 endpoint、HTTP 非 2xx、收據沒有 id
        """
        if not self.enabled:
            raise PublishError(reason="未設定 RESULTS_ENDPOINT")

        artifact = self.build_artifact(name, payload)
        logger.info(f"[Publish] POST {self.endpoint} ({name})")
        try:
            resp = retry(
                lambda: self.session.post(
                    self.endpoint, json=artifact, timeout=self.timeout,
                ),
                max_attempts=self.max_attempts,
                delay=self.retry_delay,
                exceptions=(requests.ConnectionError, requests.Timeout),
            )
        except requests.RequestException as e:
            raise PublishError(self.endpoint, reason=str(e)) from e
        logger.info(f"[Publish] Status: {resp.status_code}")

        if not resp.ok:
            raise PublishError(self.endpoint, resp.status_code, resp.text[:200])
        try:
            body = resp.json()
        except ValueError as e:
            raise PublishError(self.endpoint, resp.status_code, "收據不是 JSON") from e
        if not isinstance(body, dict) or not body.get("id"):
            raise PublishError(self.endpoint, resp.status_code, "收據缺少 id")

        return Acknowledgement(
            artifact_id=str(body["id"]), status_code=resp.status_code, received=body,
        )
