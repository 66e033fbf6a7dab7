"""
扫描过程中对外抛出的错误。
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    CAMERA_SETUP = "cameraSetup"
    PHOTO_PROCESSING = "photoProcessing"
    AUTHORIZATION_DENIED = "authorizationDenied"
    CAPTURE = "capture"


_DEFAULT_DESCRIPTIONS = {
    ErrorKind.CAMERA_SETUP: "摄像头初始化失败",
    ErrorKind.PHOTO_PROCESSING: "图片识别失败",
    ErrorKind.AUTHORIZATION_DENIED: "没有摄像头访问权限",
    ErrorKind.CAPTURE: "获取画面失败",
}


class CreditCardScannerError(Exception):
    def __init__(self, kind: ErrorKind, underlying_error: Optional[BaseException] = None) -> None:
        self.kind = kind
        self.underlying_error = underlying_error
        super().__init__(self.description)

    @property
    def description(self) -> str:
        if self.underlying_error is not None and str(self.underlying_error):
            return str(self.underlying_error)
        return _DEFAULT_DESCRIPTIONS[self.kind]

    def __repr__(self) -> str:
        return f"CreditCardScannerError(kind={self.kind.value}, underlying_error={self.underlying_error!r})"
