"""
消费者端：本地 OCR Worker。

PaddleOCR 识别一帧画面，输出带置信度的候选文本列表。
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Sequence

import numpy as np
from celery import Celery

from analyzer.models import RecognizedTextCandidate
from image_ops import decode_capture_payload
from settings import settings

app = Celery(
    "card_scanner_consumer",
    broker=settings.queue.broker_url,
    backend=settings.queue.result_backend,
)
app.conf.update(
    accept_content=["pickle", "json"],
    task_serializer="pickle",
    result_serializer="json",
)

logger = logging.getLogger(__name__)

_ocr_instance = None


def _get_ocr():
    """懒加载 OCR 实例，只在首次调用时初始化"""
    global _ocr_instance
    if _ocr_instance is None:
        from paddleocr import PaddleOCR

        logger.info("初始化 PaddleOCR 引擎...")
        _ocr_instance = PaddleOCR(
            lang=settings.ocr.lang,
            use_doc_orientation_classify=False,
            use_doc_unwarping=False,
            use_textline_orientation=settings.ocr.use_textline_orientation,
        )
    return _ocr_instance


def _collect_candidates(ocr_result: Sequence) -> List[RecognizedTextCandidate]:
    """从 OCR 结果中提取文本与置信度，兼容新旧两种输出格式"""
    if not ocr_result:
        return []
    entry = ocr_result[0]
    if isinstance(entry, dict):
        texts = entry.get("rec_texts") or []
        scores = entry.get("rec_scores")
        if scores is None:
            scores = [1.0] * len(texts)
        return [
            RecognizedTextCandidate(text=str(text), confidence=float(score))
            for text, score in zip(texts, scores)
        ]

    candidates: List[RecognizedTextCandidate] = []
    for block in entry or []:
        if not block or not isinstance(block, (list, tuple)) or len(block) < 2:
            continue
        info = block[1]
        if not info or not isinstance(info, (list, tuple)) or len(info) < 2:
            continue
        candidates.append(RecognizedTextCandidate(text=str(info[0]), confidence=float(info[1])))
    return candidates


def recognize_frame(frame: np.ndarray) -> List[RecognizedTextCandidate]:
    ocr_res = _get_ocr().predict(frame)
    candidates = _collect_candidates(ocr_res)
    logger.debug("识别到 %d 条文本", len(candidates))
    return candidates


@app.task(name=settings.queue.default_routing_key)
def handle_frame_task(image_payload: bytes) -> List[Dict[str, Any]]:
    """OCR 任务：解码画面并识别，返回候选文本。"""
    frame = decode_capture_payload(image_payload)
    if frame is None:
        raise ValueError("无法解码画面数据")
    return [candidate.to_dict() for candidate in recognize_frame(frame)]


def _default_worker_args() -> List[str]:
    # 单进程串行处理，保证同一会话的帧按顺序投票
    return [
        "worker",
        "-l",
        "info",
        "-P",
        "solo",
        "-c",
        "1",
    ]


if __name__ == "__main__":
    argv = sys.argv[1:] or _default_worker_args()
    app.worker_main(argv)
