"""
Tests for images.batch.ImageBatch

Test Coverage:
- Every tracked handle is closed on exit
- Handles are closed when the block raises
- Tracking the same handle twice closes it once
"""
import pytest

from collage_toolkit.images.batch import ImageBatch


class CountingOps:
    def __init__(self):
        self.closed = []

    def close(self, image):
        self.closed.append(image)


def test_closes_all_handles_on_exit():
    ops = CountingOps()
    a, b = object(), object()

    with ImageBatch(ops) as batch:
        assert batch.track(a) is a
        batch.track(b)
        assert len(batch) == 2

    assert ops.closed == [a, b]


def test_closes_handles_when_block_raises():
    ops = CountingOps()
    a = object()

    with pytest.raises(RuntimeError):
        with ImageBatch(ops) as batch:
            batch.track(a)
            raise RuntimeError("boom")

    assert ops.closed == [a]


def test_duplicate_tracking_closes_once():
    ops = CountingOps()
    a = object()

    with ImageBatch(ops) as batch:
        batch.track(a)
        batch.track(a)

    assert ops.closed == [a]
