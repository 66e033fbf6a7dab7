"""
多帧投票：逐帧累计各字段取值的出现次数，次数超过阈值的第一个取值即为最终结果。

卡号确定后整次扫描结束，姓名与有效期只是附带信息。
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, Optional

from analyzer.field_classifier import SKIP_WORDS, classify
from analyzer.models import (
    CreditCard,
    ExpireDate,
    FieldKind,
    Name,
    Number,
    RecognizedTextCandidate,
    ScanState,
)

logger = logging.getLogger(__name__)

DEFAULT_VOTE_THRESHOLD = 2
DEFAULT_CONFIDENCE_THRESHOLD = 0.1


class ConsensusAccumulator:
    """
    单次扫描会话的投票器。

    非线程安全：`ingest` 需由调用方串行调用。
    """

    def __init__(
        self,
        vote_threshold: int = DEFAULT_VOTE_THRESHOLD,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        skip_words: Iterable[str] = SKIP_WORDS,
    ) -> None:
        self.vote_threshold = vote_threshold
        self.confidence_threshold = confidence_threshold
        self.skip_words = tuple(skip_words)
        self._tally: Counter = Counter()
        self._card = CreditCard()
        self._state = ScanState.ACCUMULATING

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def is_finalized(self) -> bool:
        return self._state is ScanState.FINALIZED

    @property
    def card(self) -> CreditCard:
        return replace(self._card)

    @property
    def tally(self) -> Dict[FieldKind, int]:
        return dict(self._tally)

    def count(self, field: FieldKind) -> int:
        return self._tally[field]

    def ingest(self, candidates: Iterable[RecognizedTextCandidate]) -> Optional[CreditCard]:
        """处理一帧的全部候选文本，卡号在本帧确定时返回结果，否则返回 None。"""
        if self.is_finalized:
            return None

        for candidate in candidates:
            if candidate.confidence <= self.confidence_threshold:
                continue
            field = classify(candidate.text, self.skip_words)
            if field is None:
                continue
            self._tally[field] += 1
            if self._tally[field] > self.vote_threshold:
                self._decide(field)

        logger.debug("当前投票: %s", dict(self._tally))

        if self._card.number is None:
            return None
        self._state = ScanState.FINALIZED
        logger.info("扫描完成: %s", self._card.to_dict())
        return replace(self._card)

    def _decide(self, field: FieldKind) -> None:
        # 先达到阈值者生效，之后不再覆盖
        if isinstance(field, Number) and self._card.number is None:
            self._card.number = field.value
        elif isinstance(field, Name) and self._card.name is None:
            self._card.name = field.value
        elif isinstance(field, ExpireDate) and self._card.expire_date is None:
            self._card.expire_date = field
        else:
            return
        logger.info("字段已确定: %s", field)
