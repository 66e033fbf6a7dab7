"""
全局配置：从根目录的 settings.yaml 读取。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_PATH = Path(__file__).with_name("settings.yaml")


@dataclass
class QueueSettings:
    broker_url: str
    result_backend: str
    default_routing_key: str
    task_timeout_seconds: float


@dataclass
class CaptureSettings:
    device_index: int
    frame_width: int
    frame_height: int
    roi_margin: int
    min_interval_ms: int
    timeout_seconds: float


@dataclass
class OCRSettings:
    lang: str
    use_textline_orientation: bool


@dataclass
class AnalyzerSettings:
    confidence_threshold: float
    vote_threshold: int
    skip_card_word: bool


@dataclass
class LoggingSettings:
    level: str
    format: str


@dataclass
class Settings:
    queue: QueueSettings
    capture: CaptureSettings
    ocr: OCRSettings
    analyzer: AnalyzerSettings
    logging: LoggingSettings


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "queue": {
        "broker_url": "redis://localhost:6379/0",
        "result_backend": "redis://localhost:6379/1",
        "default_routing_key": "card_scanner.recognize_frame",
        "task_timeout_seconds": 10.0,
    },
    "capture": {
        "device_index": 0,
        "frame_width": 1280,
        "frame_height": 720,
        "roi_margin": 20,
        "min_interval_ms": 100,
        "timeout_seconds": 0.0,
    },
    "ocr": {
        "lang": "en",
        "use_textline_orientation": False,
    },
    "analyzer": {
        "confidence_threshold": 0.1,
        "vote_threshold": 2,
        "skip_card_word": False,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    },
}


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    data = defaults.copy()
    data.update(overrides or {})
    return data


def load_settings(path: Path = CONFIG_PATH) -> Settings:
    if not path.exists():
        raise FileNotFoundError(f"配置文件 {path} 不存在")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    sections = {name: _merge(values, raw.get(name)) for name, values in DEFAULTS.items()}
    return Settings(
        queue=QueueSettings(**sections["queue"]),
        capture=CaptureSettings(**sections["capture"]),
        ocr=OCRSettings(**sections["ocr"]),
        analyzer=AnalyzerSettings(**sections["analyzer"]),
        logging=LoggingSettings(**sections["logging"]),
    )


settings = load_settings()
