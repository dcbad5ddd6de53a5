import pytest

from core.progress import ProgressParser, completion_fraction


@pytest.mark.parametrize(
    ("elapsed_us", "total", "expected"),
    [
        (0, 100, 0.0),
        (50_000_000, 50, 1.0),
        (25_000_000, 100, 0.25),
        (75_000_000, 50, 1.0),     # overshoot is clamped
        (-1_000_000, 50, 0.0),
        (5_000_000, 0, 0.0),
    ],
)
def test_completion_fraction(elapsed_us, total, expected):
    assert completion_fraction(elapsed_us, total) == pytest.approx(expected)


def test_feed_reports_percent_for_elapsed_lines_only():
    parser = ProgressParser(total_seconds=10.0)

    assert parser.feed("frame=12\n") is None
    assert parser.feed("bitrate= 512.3kbits/s\n") is None
    assert parser.feed("out_time=00:00:02.500000\n") is None
    assert parser.feed("out_time_ms=2500000\n") == pytest.approx(25.0)
    assert parser.feed("out_time_ms=5000000") == pytest.approx(50.0)
    assert parser.percent == pytest.approx(50.0)


def test_feed_ignores_junk():
    parser = ProgressParser(total_seconds=10.0)

    assert parser.feed("") is None
    assert parser.feed("no equals sign here") is None
    assert parser.feed("out_time_ms=N/A") is None
    assert parser.percent is None


def test_unknown_duration_never_reports():
    parser = ProgressParser(total_seconds=0.0)

    for line in ("out_time_ms=1000000", "out_time_ms=99000000", "progress=end"):
        assert parser.feed(line) is None
    assert parser.percent is None


def test_progress_end_marks_finished():
    parser = ProgressParser(total_seconds=10.0)

    parser.feed("progress=continue")
    assert not parser.finished
    parser.feed("progress=end\n")
    assert parser.finished


@pytest.mark.parametrize("total", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_duration_is_unknown(total):
    assert completion_fraction(25_000_000, total) == 0.0

    parser = ProgressParser(total_seconds=total)
    assert parser.feed("out_time_ms=1000000") is None
    assert parser.percent is None


def test_non_finite_elapsed_is_ignored():
    parser = ProgressParser(total_seconds=10.0)

    assert parser.feed("out_time_ms=nan") is None
    assert parser.feed("out_time_ms=inf") is None
    assert parser.percent is None
