import pytest

from analyzer.consensus import ConsensusAccumulator
from analyzer.errors import CreditCardScannerError, ErrorKind
from analyzer.image_analyzer import ImageAnalyzer
from analyzer.models import RecognizedTextCandidate

NUMBER = "4111 1111 1111 1111"


def recognizer(image):
    return [RecognizedTextCandidate(text=NUMBER, confidence=0.9)]


def broken_recognizer(image):
    raise RuntimeError("ocr engine crashed")


def test_analyze_returns_card_on_third_frame():
    analyzer = ImageAnalyzer(recognizer)

    assert analyzer.analyze(object()) is None
    assert analyzer.analyze(object()) is None
    assert analyzer.analyze(object()).number == NUMBER


def test_ocr_failure_is_wrapped():
    analyzer = ImageAnalyzer(broken_recognizer)

    with pytest.raises(CreditCardScannerError) as excinfo:
        analyzer.analyze(object())

    assert excinfo.value.kind is ErrorKind.PHOTO_PROCESSING
    assert isinstance(excinfo.value.underlying_error, RuntimeError)
    assert excinfo.value.description == "ocr engine crashed"


def test_ocr_failure_does_not_touch_tally():
    accumulator = ConsensusAccumulator()
    analyzer = ImageAnalyzer(broken_recognizer, accumulator=accumulator)

    with pytest.raises(CreditCardScannerError):
        analyzer.analyze(object())

    assert accumulator.tally == {}


def test_none_from_recognizer_is_empty_batch():
    analyzer = ImageAnalyzer(lambda image: None)

    assert analyzer.analyze(object()) is None


def test_reset_starts_new_session():
    analyzer = ImageAnalyzer(recognizer)
    for _ in range(3):
        analyzer.analyze(object())
    assert analyzer.accumulator.is_finalized

    analyzer.reset()

    assert not analyzer.accumulator.is_finalized
    assert analyzer.analyze(object()) is None


def test_error_default_description():
    error = CreditCardScannerError(ErrorKind.CAPTURE)

    assert error.description == "获取画面失败"
    assert str(error) == error.description
    assert error.underlying_error is None
