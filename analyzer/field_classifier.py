"""
字段分类：把一条 OCR 文本归类为卡号 / 持卡人 / 有效期，无法归类时返回 None。

按顺序匹配，先命中者生效：
1. 含发卡行、卡组织等宣传字样的文本直接丢弃
2. 4 组 4 位数字 -> 卡号
3. MM/YY -> 有效期
4. 两个以上的英文单词（可带中间名缩写）-> 持卡人
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from analyzer.models import ExpireDate, FieldKind, Name, Number

SKIP_WORDS = ("mastercard", "jcb", "visa", "express", "bank", "platinum", "reward")
SKIP_WORDS_WITH_CARD = SKIP_WORDS + ("card",)
# 有效期附近的说明文字，形似姓名，只在姓名阶段排除
INVALID_NAMES = ("expiration", "valid", "since", "from", "until", "month", "year")

# 水平空白（不含换行）
_HSPACE = r"[^\S\r\n]"

NUMBER_PATTERN = re.compile(rf"(?<![0-9])[0-9]{{4}}(?:{_HSPACE}+[0-9]{{4}}){{3}}(?![0-9])")
DATE_PATTERN = re.compile(r"(?<![0-9])([0-9]{2})/([0-9]{2})(?![0-9])")
NAME_PATTERN = re.compile(rf"[A-Za-z]{{2,}}{_HSPACE}(?:[A-Za-z.]+{_HSPACE})?[A-Za-z]{{2,}}")
_HSPACE_RUN = re.compile(rf"{_HSPACE}+")


def _contains_any(text: str, words: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


def _match_number(text: str) -> Optional[Number]:
    match = NUMBER_PATTERN.search(text)
    if match is None:
        return None
    return Number(_HSPACE_RUN.sub(" ", match.group(0)))


def _match_expire_date(text: str) -> Optional[ExpireDate]:
    match = DATE_PATTERN.search(text)
    if match is None:
        return None
    try:
        month = int(match.group(1))
        year = int(match.group(2))
    except ValueError:
        return None
    if not 1 <= month <= 12:
        return None
    return ExpireDate(month=month, year=year)


def _match_name(text: str) -> Optional[Name]:
    match = NAME_PATTERN.search(text)
    if match is None or _contains_any(text, INVALID_NAMES):
        return None
    return Name(match.group(0))


def classify(text: str, skip_words: Iterable[str] = SKIP_WORDS) -> Optional[FieldKind]:
    """归类单条文本，纯函数。"""
    if not text or _contains_any(text, skip_words):
        return None

    number = _match_number(text)
    if number is not None:
        return number

    if DATE_PATTERN.search(text):
        # 匹配到日期格式但月份非法时，整条文本作废
        return _match_expire_date(text)

    return _match_name(text)
