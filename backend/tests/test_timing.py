"""Tests for per-step pipeline timings."""
from app.utils.timing import StepTimer


def test_marks_record_each_step_and_log_with_context():
    lines = []
    timer = StepTimer("bookshelf", log_fn=lines.append)
    timer.mark("upload")
    timer.context = "bookshelf media_id=abc"
    timer.mark("analysis")

    assert list(timer.steps) == ["upload", "analysis"]
    assert all(value >= 0 for value in timer.steps.values())
    assert lines[0].startswith("bookshelf upload: ")
    assert lines[1].startswith("bookshelf media_id=abc analysis: ")
    assert lines[1].endswith("ms")


def test_total_is_sum_of_steps():
    timer = StepTimer(log_fn=lambda _: None)
    timer.steps = {"upload": 1.5, "analysis": 2.25}
    assert timer.total_ms == 3.75
