"""
图片分析：调用 OCR 得到候选文本，再交给投票器。
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from analyzer.consensus import ConsensusAccumulator
from analyzer.errors import CreditCardScannerError, ErrorKind
from analyzer.models import CreditCard, RecognizedTextCandidate

logger = logging.getLogger(__name__)

Recognizer = Callable[[Any], Sequence[RecognizedTextCandidate]]


class ImageAnalyzer:
    def __init__(
        self,
        recognizer: Recognizer,
        accumulator: Optional[ConsensusAccumulator] = None,
        accumulator_factory: Callable[[], ConsensusAccumulator] = ConsensusAccumulator,
    ) -> None:
        self.recognizer = recognizer
        self.accumulator_factory = accumulator_factory
        self.accumulator = accumulator or accumulator_factory()

    def analyze(self, image: Any) -> Optional[CreditCard]:
        """
        识别一帧画面。

        OCR 调用失败时抛出 PHOTO_PROCESSING 错误，不做重试；下一帧照常处理。
        """
        try:
            candidates = self.recognizer(image)
        except Exception as exc:
            logger.warning("OCR 识别失败: %s", exc)
            raise CreditCardScannerError(ErrorKind.PHOTO_PROCESSING, underlying_error=exc) from exc
        return self.accumulator.ingest(candidates or [])

    def reset(self) -> None:
        self.accumulator = self.accumulator_factory()
