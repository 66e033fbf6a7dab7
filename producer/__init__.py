"""
Producer 侧核心组件：

- `CameraCapture`：负责读取摄像头画面并裁剪取景框
- `ScannerApp`：调度 取画面 -> OCR -> 投票
"""

from .camera_capture import CameraCapture
from .producer import CeleryRecognizer, ScannerApp


__all__ = ["CameraCapture", "CeleryRecognizer", "ScannerApp"]
