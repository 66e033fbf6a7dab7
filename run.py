"""
程序主入口：实时扫描、回放截图目录、调试单条文本分类。
"""

from __future__ import annotations

import functools
import json
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

import click

from analyzer import (
    ConsensusAccumulator,
    CreditCard,
    CreditCardScannerError,
    ExpireDate,
    FieldKind,
    ImageAnalyzer,
    classify,
)
from analyzer.field_classifier import SKIP_WORDS, SKIP_WORDS_WITH_CARD
from analyzer.image_analyzer import Recognizer
from image_ops import load_frame
from producer import CameraCapture, CeleryRecognizer, ScannerApp
from settings import settings

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")


def _skip_words():
    return SKIP_WORDS_WITH_CARD if settings.analyzer.skip_card_word else SKIP_WORDS


def _build_recognizer(use_celery: bool) -> Recognizer:
    if use_celery:
        from consumer.worker import handle_frame_task

        return CeleryRecognizer(handle_frame_task, settings.queue.task_timeout_seconds)
    from consumer.worker import recognize_frame

    return recognize_frame


def _build_analyzer(use_celery: bool) -> ImageAnalyzer:
    factory = functools.partial(
        ConsensusAccumulator,
        vote_threshold=settings.analyzer.vote_threshold,
        confidence_threshold=settings.analyzer.confidence_threshold,
        skip_words=_skip_words(),
    )
    return ImageAnalyzer(_build_recognizer(use_celery), accumulator_factory=factory)


def _sorted_images(image_dir: Path) -> List[Path]:
    image_files = [p for p in image_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES]
    return sorted(image_files, key=lambda p: (int(p.stem) if p.stem.isdigit() else 0, p.name))


def _iter_frames(image_files: List[Path]) -> Iterator:
    for image_path in image_files:
        frame = load_frame(image_path)
        if frame is None:
            click.echo(f"跳过无法读取的图片: {image_path.name}", err=True)
            continue
        yield frame


def _echo_card(card: Optional[CreditCard]) -> None:
    if card is None:
        click.echo("未能确定卡号", err=True)
        sys.exit(1)
    click.echo(json.dumps(card.to_dict(), ensure_ascii=False, indent=2))


def _describe(field: Optional[FieldKind]) -> str:
    if field is None:
        return "-"
    if isinstance(field, ExpireDate):
        return f"ExpireDate {field}"
    return f"{type(field).__name__} {field.value}"


def _report_error(exc: CreditCardScannerError) -> None:
    click.echo(f"[{exc.kind.value}] {exc.description}", err=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
def cli(verbose: bool) -> None:
    """银行卡扫描工具：从连续画面中识别卡号、持卡人和有效期"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.logging.level,
        format=settings.logging.format,
    )


@cli.command()
@click.option("--device", "-d", type=int, default=settings.capture.device_index, help="摄像头序号")
@click.option("--timeout", "-t", type=float, default=settings.capture.timeout_seconds, help="超时秒数，0 表示不限时")
@click.option("--celery", "-c", is_flag=True, help="使用 Celery 处理（需要启动 worker）")
def scan(device: int, timeout: float, celery: bool) -> None:
    """打开摄像头实时扫描，卡号确定后输出结果"""
    camera = CameraCapture(
        device_index=device,
        frame_width=settings.capture.frame_width,
        frame_height=settings.capture.frame_height,
        roi_margin=settings.capture.roi_margin,
    )
    app = ScannerApp(camera, _build_analyzer(celery))
    click.echo("开始扫描，请将卡片置于画面中央，按 Ctrl+C 停止...")
    try:
        card = app.run_forever(
            interval_ms=settings.capture.min_interval_ms,
            timeout_seconds=timeout,
            on_error=_report_error,
        )
    except KeyboardInterrupt:
        click.echo("\n扫描已停止")
        sys.exit(1)
    except CreditCardScannerError as exc:
        _report_error(exc)
        sys.exit(1)
    finally:
        camera.release()
    _echo_card(card)


@cli.command()
@click.option("--dir", "-d", required=True, help="图片目录路径")
@click.option("--celery", "-c", is_flag=True, help="使用 Celery 处理（需要启动 worker）")
def process(dir: str, celery: bool) -> None:
    """按序号回放目录中的画面，直到卡号确定"""
    image_dir = Path(dir)
    if not image_dir.is_dir():
        click.echo(f"目录不存在: {image_dir}", err=True)
        sys.exit(1)

    image_files = _sorted_images(image_dir)
    click.echo(f"找到 {len(image_files)} 张图片，开始处理...")
    app = ScannerApp(None, _build_analyzer(celery))
    card = app.run_frames(_iter_frames(image_files), on_error=_report_error)
    _echo_card(card)


@cli.command(name="classify")
@click.argument("texts", nargs=-1, required=True)
def classify_command(texts: List[str]) -> None:
    """对单条文本做字段分类，便于调试规则"""
    for text in texts:
        click.echo(f"{text!r} -> {_describe(classify(text, _skip_words()))}")


if __name__ == "__main__":
    cli()
