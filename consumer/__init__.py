"""
Consumer 侧模块。

- worker: PaddleOCR 识别与 Celery 任务，输出候选文本。
"""

__all__ = []
