"""
分析核心：

- field_classifier: 单条 OCR 文本 -> 字段类型
- consensus: 多帧投票，决定最终字段
- image_analyzer: OCR 调用与错误包装
"""

from .consensus import ConsensusAccumulator
from .errors import CreditCardScannerError, ErrorKind
from .field_classifier import classify
from .image_analyzer import ImageAnalyzer
from .models import (
    CreditCard,
    ExpireDate,
    FieldKind,
    Name,
    Number,
    RecognizedTextCandidate,
    ScanState,
)

__all__ = [
    "ConsensusAccumulator",
    "CreditCard",
    "CreditCardScannerError",
    "ErrorKind",
    "ExpireDate",
    "FieldKind",
    "ImageAnalyzer",
    "Name",
    "Number",
    "RecognizedTextCandidate",
    "ScanState",
    "classify",
]
