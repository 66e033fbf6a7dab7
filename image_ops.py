"""
图像通用操作：

提供：
- 任意输入到 PIL Image / RGB 数组的转换
- 图像与 bytes 的互转（Celery 传输用）
- 卡片取景框的计算与裁剪
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageFile, UnidentifiedImageError

ImageSource = Union[str, Path, np.ndarray, Image.Image, ImageFile.ImageFile]
Region = Tuple[int, int, int, int]  # (left, top, right, bottom)

# 银行卡高宽比近似黄金比例
CARD_HEIGHT_RATIO = 0.6180469716


def load_image(source: ImageSource) -> Image.Image:
    if isinstance(source, Image.Image):
        return source.copy()
    if isinstance(source, np.ndarray):
        return Image.fromarray(source)
    if isinstance(source, (str, Path)):
        return Image.open(source)
    raise TypeError(f"Unsupported image source: {type(source)}")


def load_frame(path: Union[str, Path]) -> Optional[np.ndarray]:
    """读取图片文件为 RGB 数组，读取失败返回 None。"""
    img = cv2.imread(str(path))
    if img is None:
        return None
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def image_to_bytes(image: Image.Image, fmt: str = "JPEG") -> bytes:
    with io.BytesIO() as buffer:
        image.save(buffer, format=fmt)
        return buffer.getvalue()


def encode_capture_payload(source: ImageSource, fmt: str = "PNG") -> bytes:
    image = load_image(source)
    return image_to_bytes(image, fmt=fmt)


def decode_capture_payload(payload: bytes) -> Optional[np.ndarray]:
    with io.BytesIO(payload) as buffer:
        try:
            with Image.open(buffer) as img:
                rgb = img.convert("RGB")
        except (UnidentifiedImageError, OSError):
            return None
    return np.array(rgb)


def card_region_of_interest(width: int, height: int, margin: int = 20) -> Region:
    """
    画面中央的卡片取景框：左右各留 margin，高度按卡片比例，垂直居中。
    画面过矮时以高度为准反推宽度。
    """
    roi_width = max(1, width - 2 * margin)
    roi_height = int(roi_width * CARD_HEIGHT_RATIO)
    if roi_height > height:
        roi_height = height
        roi_width = min(width, int(height / CARD_HEIGHT_RATIO))
    left = (width - roi_width) // 2
    top = (height - roi_height) // 2
    return (left, top, left + roi_width, top + roi_height)


def crop_region(frame: np.ndarray, region: Region) -> np.ndarray:
    left, top, right, bottom = region
    h, w = frame.shape[:2]
    left, right = max(0, left), min(w, right)
    top, bottom = max(0, top), min(h, bottom)
    return frame[top:bottom, left:right]
