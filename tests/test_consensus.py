from analyzer.consensus import ConsensusAccumulator
from analyzer.models import CreditCard, ExpireDate, Name, Number, RecognizedTextCandidate, ScanState

NUMBER = "4111 1111 1111 1111"
OTHER_NUMBER = "5500 0000 0000 0004"


def frame(*texts, confidence=0.9):
    return [RecognizedTextCandidate(text=text, confidence=confidence) for text in texts]


def test_number_decided_on_third_frame():
    accumulator = ConsensusAccumulator()

    assert accumulator.ingest(frame(NUMBER)) is None
    assert accumulator.ingest(frame(NUMBER)) is None
    card = accumulator.ingest(frame(NUMBER))

    assert card == CreditCard(number=NUMBER)
    assert accumulator.state is ScanState.FINALIZED


def test_mixed_fields():
    accumulator = ConsensusAccumulator()
    texts = ("VISA", NUMBER, "JOHN SMITH", "04/27")

    assert accumulator.ingest(frame(*texts)) is None
    assert accumulator.ingest(frame(*texts)) is None
    card = accumulator.ingest(frame(*texts))

    assert card.number == NUMBER
    assert card.name == "JOHN SMITH"
    assert card.expire_date == ExpireDate(month=4, year=27)
    assert "VISA" not in (card.number, card.name)


def test_name_and_date_do_not_finish_the_scan():
    accumulator = ConsensusAccumulator()
    for _ in range(5):
        assert accumulator.ingest(frame("JOHN SMITH", "04/27")) is None

    assert accumulator.state is ScanState.ACCUMULATING
    assert accumulator.card == CreditCard(name="JOHN SMITH", expire_date=ExpireDate(month=4, year=27))


def test_optional_fields_below_threshold_stay_unset():
    accumulator = ConsensusAccumulator()
    accumulator.ingest(frame(NUMBER, "JOHN SMITH"))
    accumulator.ingest(frame(NUMBER))
    card = accumulator.ingest(frame(NUMBER))

    assert card.number == NUMBER
    assert card.name is None
    assert card.expire_date is None


def test_first_value_to_reach_threshold_wins():
    accumulator = ConsensusAccumulator()
    for _ in range(3):
        accumulator.ingest(frame("JOHN SMITH"))
    for _ in range(6):
        accumulator.ingest(frame("JANE DOE"))

    assert accumulator.count(Name("JANE DOE")) > accumulator.count(Name("JOHN SMITH"))
    card = None
    for _ in range(3):
        card = accumulator.ingest(frame(NUMBER)) or card
    assert card.name == "JOHN SMITH"


def test_first_number_wins_within_a_frame():
    accumulator = ConsensusAccumulator()
    accumulator.ingest(frame(NUMBER, OTHER_NUMBER))
    accumulator.ingest(frame(NUMBER, OTHER_NUMBER))
    card = accumulator.ingest(frame(OTHER_NUMBER, NUMBER))

    assert card.number == OTHER_NUMBER


def test_duplicates_in_one_frame_are_counted():
    accumulator = ConsensusAccumulator()
    assert accumulator.ingest(frame(NUMBER, NUMBER)) is None
    card = accumulator.ingest(frame(NUMBER))

    assert card.number == NUMBER


def test_low_confidence_is_ignored():
    accumulator = ConsensusAccumulator()
    for _ in range(5):
        assert accumulator.ingest(frame(NUMBER, confidence=0.1)) is None
        assert accumulator.ingest(frame(NUMBER, confidence=0.05)) is None

    assert accumulator.count(Number(NUMBER)) == 0
    assert accumulator.tally == {}


def test_confidence_just_above_threshold_counts():
    accumulator = ConsensusAccumulator()
    accumulator.ingest(frame(NUMBER, confidence=0.11))

    assert accumulator.count(Number(NUMBER)) == 1


def test_ingest_after_finalization_is_noop():
    accumulator = ConsensusAccumulator()
    card = None
    for _ in range(3):
        card = accumulator.ingest(frame(NUMBER))
    snapshot = CreditCard(number=card.number, name=card.name, expire_date=card.expire_date)
    tally = accumulator.tally

    for _ in range(5):
        assert accumulator.ingest(frame(OTHER_NUMBER, "JOHN SMITH", "04/27")) is None

    assert card == snapshot
    assert accumulator.tally == tally
    assert accumulator.is_finalized


def test_returned_card_is_a_copy():
    accumulator = ConsensusAccumulator()
    card = None
    for _ in range(3):
        card = accumulator.ingest(frame(NUMBER))
    card.name = "SOMEONE ELSE"

    assert accumulator.card.name is None


def test_empty_batches():
    accumulator = ConsensusAccumulator()
    for _ in range(10):
        assert accumulator.ingest([]) is None
    assert accumulator.card.is_empty


def test_custom_threshold():
    accumulator = ConsensusAccumulator(vote_threshold=0)
    card = accumulator.ingest(frame(NUMBER))

    assert card.number == NUMBER


def test_skip_words_are_configurable():
    accumulator = ConsensusAccumulator(skip_words=("smith",))
    for _ in range(3):
        accumulator.ingest(frame("JOHN SMITH"))

    assert accumulator.card.name is None
