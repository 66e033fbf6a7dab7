"""
识别数据模型：

- `RecognizedTextCandidate`：OCR 单个文本区域的识别结果
- `Number` / `Name` / `ExpireDate`：字段分类结果（`FieldKind`）
- `CreditCard`：逐步确定的卡片信息
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class RecognizedTextCandidate:
    text: str
    confidence: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecognizedTextCandidate":
        return cls(text=str(data.get("text", "")), confidence=float(data.get("confidence", 0.0)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Number:
    value: str


@dataclass(frozen=True)
class Name:
    value: str


@dataclass(frozen=True)
class ExpireDate:
    month: int
    year: int

    @property
    def full_year(self) -> int:
        # 卡面只印两位年份
        return self.year + 2000 if self.year < 100 else self.year

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year:02d}"


FieldKind = Union[Number, Name, ExpireDate]


class ScanState(Enum):
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


@dataclass
class CreditCard:
    number: Optional[str] = None
    name: Optional[str] = None
    expire_date: Optional[ExpireDate] = None

    @property
    def is_empty(self) -> bool:
        return self.number is None and self.name is None and self.expire_date is None

    def to_dict(self) -> Dict[str, Any]:
        date = self.expire_date
        return {
            "number": self.number,
            "name": self.name,
            "expire_date": {"month": date.month, "year": date.year} if date else None,
        }
