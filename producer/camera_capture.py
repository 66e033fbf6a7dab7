"""
摄像头模块：打开设备、读取画面并裁剪到卡片取景框。
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2
import numpy as np

from analyzer.errors import CreditCardScannerError, ErrorKind
from image_ops import Region, card_region_of_interest, crop_region

logger = logging.getLogger(__name__)


class CameraCapture:
    def __init__(
        self,
        device_index: int = 0,
        frame_width: int = 1280,
        frame_height: int = 720,
        roi_margin: int = 20,
    ) -> None:
        self.device_index = device_index
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.roi_margin = roi_margin
        self.last_array: Optional[np.ndarray] = None
        self._cap = None

    def open(self) -> None:
        cap = cv2.VideoCapture(self.device_index)
        if not cap.isOpened():
            cap.release()
            raise CreditCardScannerError(
                ErrorKind.CAMERA_SETUP,
                underlying_error=RuntimeError(f"无法打开摄像头 {self.device_index}"),
            )
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.frame_width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.frame_height)
        cap.set(cv2.CAP_PROP_AUTOFOCUS, 1)
        self._cap = cap
        logger.info("摄像头 %s 已打开", self.device_index)

    def capture(self) -> np.ndarray:
        """读取一帧，返回取景框内的 RGB 画面。"""
        if self._cap is None:
            self.open()
        ok, frame = self._cap.read()
        if not ok or frame is None:
            raise CreditCardScannerError(ErrorKind.CAPTURE)
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        self.last_array = rgb
        return crop_region(rgb, self.region_of_interest(rgb))

    def region_of_interest(self, frame: np.ndarray) -> Region:
        height, width = frame.shape[:2]
        return card_region_of_interest(width, height, self.roi_margin)

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
