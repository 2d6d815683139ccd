"""
Tests for engine.homogenize

Test Coverage:
- predominant_extent(): majority vote, ties favour landscape
- homogenize_collection(): conditional resize + sharpen
- Unconditional auto-level/auto-gamma on every image
- Handles derived during homogenization are tracked by the batch
"""
from collage_toolkit.core.models import GeometricOrientation
from collage_toolkit.engine.homogenize import homogenize_collection, predominant_extent
from collage_toolkit.images.batch import ImageBatch


def _load_all(ops, names):
    return [ops.load(n) for n in names]


def test_predominant_extent_empty():
    assert predominant_extent([]) is None


def test_predominant_extent_majority_landscape():
    extent = predominant_extent([(1200, 800), (1200, 900), (1200, 1800)])

    assert extent.orientation == GeometricOrientation.LANDSCAPE
    assert (extent.max_width, extent.max_height) == (1200, 900)
    assert (extent.landscape_count, extent.portrait_count) == (2, 1)


def test_predominant_extent_majority_portrait():
    extent = predominant_extent([(1200, 800), (1200, 1800), (1200, 1600)])

    assert extent.orientation == GeometricOrientation.PORTRAIT
    assert (extent.max_width, extent.max_height) == (1200, 1800)


def test_predominant_extent_tie_favours_landscape():
    extent = predominant_extent([(1200, 800), (1200, 1800)])

    assert extent.orientation == GeometricOrientation.LANDSCAPE
    assert extent.max_height == 800


def test_minority_portrait_is_shrunk_to_predominant_height(fake_ops):
    """4 landscape + 1 portrait -> portrait height matches landscape max height."""
    sizes = {f"l{i}.jpg": (1200, 700 + i * 50) for i in range(4)}
    sizes["p.jpg"] = (1200, 1800)
    ops = fake_ops(sizes)
    images = _load_all(ops, list(sizes))

    result = homogenize_collection(ops, images)

    portrait = result[-1]
    assert portrait.height == 850
    assert portrait.width == 567
    assert "enhance" in portrait.history


def test_narrow_landscape_is_upscaled_to_predominant_width(fake_ops):
    ops = fake_ops({"a.jpg": (1200, 800), "b.jpg": (1200, 900), "c.jpg": (800, 600)})
    images = _load_all(ops, ["a.jpg", "b.jpg", "c.jpg"])

    result = homogenize_collection(ops, images)

    assert (result[2].width, result[2].height) == (1200, 900)
    assert "enhance" in result[2].history


def test_predominant_maximum_is_never_decreased(fake_ops):
    ops = fake_ops({"a.jpg": (1200, 800), "b.jpg": (1000, 900), "c.jpg": (700, 1400)})
    images = _load_all(ops, ["a.jpg", "b.jpg", "c.jpg"])
    before = predominant_extent([(i.width, i.height) for i in images])

    result = homogenize_collection(ops, images)
    landscape = [r for r in result if r.width >= r.height]

    assert max(r.width for r in landscape) >= before.max_width
    assert max(r.height for r in landscape) >= before.max_height


def test_landscape_minority_in_portrait_batch_matches_width(fake_ops):
    """Minority landscape images end up at least as wide as the predominant max width."""
    ops = fake_ops({"p1.jpg": (1200, 1800), "p2.jpg": (1200, 1600), "l.jpg": (900, 600)})
    images = _load_all(ops, ["p1.jpg", "p2.jpg", "l.jpg"])

    result = homogenize_collection(ops, images)

    assert result[2].width == 1200


def test_equalization_runs_on_every_image(fake_ops):
    """auto_level then auto_gamma run once per image, resized or not."""
    ops = fake_ops({"a.jpg": (1200, 800), "b.jpg": (1200, 800)})
    images = _load_all(ops, ["a.jpg", "b.jpg"])

    result = homogenize_collection(ops, images)

    for img in result:
        assert "enhance" not in img.history
        assert img.history[-2:] == ["auto_level", "auto_gamma"]
        assert img.history.count("auto_level") == 1


def test_resize_happens_before_equalization(fake_ops):
    ops = fake_ops({"a.jpg": (1200, 800), "b.jpg": (1200, 800), "p.jpg": (1200, 1800)})
    images = _load_all(ops, ["a.jpg", "b.jpg", "p.jpg"])

    result = homogenize_collection(ops, images)

    history = result[2].history
    assert history.index("enhance") < history.index("auto_level") < history.index("auto_gamma")


def test_square_image_uses_height_branch(fake_ops):
    """Squares are shrunk by height when taller than the portrait maximum."""
    ops = fake_ops({"p1.jpg": (600, 1000), "p2.jpg": (700, 1100), "s.jpg": (1200, 1200)})
    images = _load_all(ops, ["p1.jpg", "p2.jpg", "s.jpg"])

    result = homogenize_collection(ops, images)

    assert (result[2].width, result[2].height) == (1100, 1100)


def test_order_is_preserved(fake_ops):
    names = ["a.jpg", "b.jpg", "c.jpg"]
    ops = fake_ops({"a.jpg": (1200, 800), "b.jpg": (1200, 1800), "c.jpg": (1200, 900)})

    result = homogenize_collection(ops, _load_all(ops, names))

    assert [r.source for r in result] == names


def test_empty_batch_returns_empty_list(fake_ops):
    assert homogenize_collection(fake_ops(), []) == []


def test_derived_handles_are_tracked_by_batch(fake_ops):
    ops = fake_ops({"a.jpg": (1200, 800), "p.jpg": (1200, 1800), "b.jpg": (1200, 900)})
    images = _load_all(ops, ["a.jpg", "p.jpg", "b.jpg"])

    with ImageBatch(ops) as batch:
        for img in images:
            batch.track(img)
        homogenize_collection(ops, images, batch)

    assert all(img.closed for img in ops.created)
