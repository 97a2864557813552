from fakes import T0, event

from vp_metrics.coverage import SEGMENT_COUNT, aggregate, isValidEvent, segmentRange


def test_two_spans_cover_seven_segments() -> None:
    events = [event("A", 0, 50, minutes=0), event("A", 500, 20, minutes=5)]

    records = aggregate(events, 1000.0)

    record = records["A"]
    assert record.segmentsViewed() == 7
    covered = [idx for idx, seg in enumerate(record.bitmap) if seg]
    assert covered == [0, 1, 2, 3, 4, 50, 51]
    assert record.last_viewed == events[1].time


def test_span_past_end_is_invalid_but_updates_last_viewed() -> None:
    events = [event("A", 0, 50, minutes=0), event("A", 990, 50, minutes=30)]

    record = aggregate(events, 1000.0)["A"]

    assert record.segmentsViewed() == 5
    assert record.last_viewed == events[1].time


def test_end_boundary_segment_not_marked() -> None:
    record = aggregate([event("A", 10, 20)], 1000.0)["A"]

    assert [idx for idx, seg in enumerate(record.bitmap) if seg] == [1, 2]


def test_unknown_duration_keeps_bitmap_empty() -> None:
    events = [event("A", 0, 50, minutes=1), event("B", 10, 10, minutes=2)]

    records = aggregate(events, None)

    assert set(records) == {"A", "B"}
    for record in records.values():
        assert len(record.bitmap) == SEGMENT_COUNT
        assert record.segmentsViewed() == 0
    assert records["B"].last_viewed == events[1].time


def test_zero_duration_keeps_bitmap_empty() -> None:
    record = aggregate([event("A", 0, 5)], 0.0)["A"]

    assert record.segmentsViewed() == 0


def test_bitmap_length_independent_of_duration() -> None:
    for duration in (1.0, 37.5, 1000.0, 86400.0):
        record = aggregate([event("A", 0, duration / 2)], duration)["A"]
        assert len(record.bitmap) == SEGMENT_COUNT


def test_validity_predicate() -> None:
    assert isValidEvent(event("A", 0, 50), 1000.0)
    assert not isValidEvent(event("A", 1000, 1), 1000.0)
    assert not isValidEvent(event("A", 10, 0), 1000.0)
    assert not isValidEvent(event("A", 0, 1000), 1000.0)
    assert not isValidEvent(event("A", 990, 10), 1000.0)
    assert not isValidEvent(event("A", 0, 10), None)


def test_negative_start_does_not_wrap_around() -> None:
    record = aggregate([event("A", -15, 40)], 1000.0)["A"]

    assert record.bitmap[SEGMENT_COUNT - 1] is False
    assert record.bitmap[SEGMENT_COUNT - 2] is False
    assert [idx for idx, seg in enumerate(record.bitmap) if seg] == [0, 1]


def test_order_independent_results() -> None:
    events = [
        event("A", 100, 30, minutes=9),
        event("B", 0, 10, minutes=1),
        event("A", 0, 15, minutes=3),
        event("A", 990, 50, minutes=20),
    ]

    forward = aggregate(events, 1000.0)
    backward = aggregate(list(reversed(events)), 1000.0)

    for user_id in ("A", "B"):
        assert forward[user_id].bitmap == backward[user_id].bitmap
        assert forward[user_id].last_viewed == backward[user_id].last_viewed
    assert forward["A"].last_viewed == T0.replace(minute=20)


def test_users_reported_in_first_seen_order() -> None:
    events = [event("B", 0, 10), event("A", 0, 10), event("B", 20, 10)]

    assert list(aggregate(events, 1000.0)) == ["B", "A"]


def test_segment_range_floors_both_ends() -> None:
    assert segmentRange(0, 50, 10.0) == (0, 5)
    assert segmentRange(15, 10, 10.0) == (1, 2)
    assert segmentRange(500, 20, 10.0) == (50, 52)
