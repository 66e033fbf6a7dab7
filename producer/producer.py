"""
Producer 端扫描循环：取画面 -> OCR -> 投票，卡号确定后停止。

OCR 可在本进程直接调用，也可通过 Celery 交给 consumer worker。
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Optional

import numpy as np

from analyzer.errors import CreditCardScannerError, ErrorKind
from analyzer.image_analyzer import ImageAnalyzer
from analyzer.models import CreditCard, RecognizedTextCandidate
from image_ops import encode_capture_payload

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[CreditCardScannerError], None]


class CeleryRecognizer:
    """把画面发送给 Celery OCR 任务并取回候选文本"""

    def __init__(self, celery_task, timeout_seconds: float) -> None:
        self.celery_task = celery_task
        self.timeout_seconds = timeout_seconds

    def __call__(self, frame: np.ndarray) -> List[RecognizedTextCandidate]:
        payload = encode_capture_payload(frame, fmt="PNG")
        async_result = self.celery_task.delay(payload)
        raw = async_result.get(timeout=self.timeout_seconds)
        return [RecognizedTextCandidate.from_dict(item) for item in raw or []]


class ScannerApp:
    def __init__(self, frame_source: Any, image_analyzer: ImageAnalyzer) -> None:
        self.frame_source = frame_source
        self.image_analyzer = image_analyzer
        self.frame_counter = 0

    def run_once(self) -> Optional[CreditCard]:
        frame = self.frame_source.capture()
        return self._analyze(frame)

    def run_forever(
        self,
        interval_ms: int = 100,
        timeout_seconds: float = 0,
        on_error: Optional[ErrorHandler] = None,
    ) -> Optional[CreditCard]:
        """
        持续扫描直到卡号确定。

        超时由调用方决定，timeout_seconds 为 0 时不限时，超时返回 None。
        单帧 OCR 失败只上报一次，然后继续处理下一帧；摄像头错误直接抛出。
        """
        interval = max(interval_ms, 0) / 1000.0
        deadline = time.monotonic() + timeout_seconds if timeout_seconds > 0 else None

        while True:
            try:
                card = self.run_once()
            except CreditCardScannerError as exc:
                if exc.kind is not ErrorKind.PHOTO_PROCESSING:
                    raise
                self._report(exc, on_error)
                card = None
            if card is not None:
                return card
            if deadline is not None and time.monotonic() >= deadline:
                logger.info("扫描超时，已处理 %d 帧", self.frame_counter)
                return None
            if interval:
                time.sleep(interval)

    def run_frames(
        self,
        frames: Iterable[np.ndarray],
        on_error: Optional[ErrorHandler] = None,
    ) -> Optional[CreditCard]:
        """依次处理给定画面，卡号确定即停止；画面耗尽仍未确定返回 None。"""
        for frame in frames:
            try:
                card = self._analyze(frame)
            except CreditCardScannerError as exc:
                self._report(exc, on_error)
                continue
            if card is not None:
                return card
        return None

    def _analyze(self, frame: np.ndarray) -> Optional[CreditCard]:
        self.frame_counter += 1
        card = self.image_analyzer.analyze(frame)
        if card is not None:
            logger.info("第 %d 帧确定卡号", self.frame_counter)
        return card

    @staticmethod
    def _report(exc: CreditCardScannerError, on_error: Optional[ErrorHandler]) -> None:
        if on_error is not None:
            on_error(exc)
        else:
            logger.warning("跳过该帧: %s", exc.description)
