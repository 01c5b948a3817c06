import numpy as np

from core.qr.scan_strategy import buildScanStrategies, computeScanSizes, resizeImage


def test_sizes_keep_aspect_ratio_on_long_edge():
    sizes = computeScanSizes(400, 200)

    assert [(s.label, s.width, s.height) for s in sizes] == [
        ("native", 400, 200),
        ("long800", 800, 400),
        ("long1000", 1000, 500),
        ("long1200", 1200, 600),
    ]


def test_portrait_sizes_scale_height():
    sizes = computeScanSizes(300, 600)

    assert (sizes[1].width, sizes[1].height) == (400, 800)


def test_rescale_matching_native_size_is_skipped():
    sizes = computeScanSizes(1000, 500)

    assert [s.label for s in sizes] == ["native", "long800", "long1200"]


def test_strategy_order_sizes_then_filters_then_inversion():
    strategies = buildScanStrategies(400, 200, filterNames=["original", "binarize"])

    described = [(s.size.label, s.filterName, s.tryInvert) for s in strategies[:6]]
    assert described == [
        ("native", "original", False),
        ("native", "original", True),
        ("native", "binarize", False),
        ("native", "binarize", True),
        ("long800", "original", False),
        ("long800", "original", True),
    ]
    assert len(strategies) == 4 * 2 * 2


def test_full_table_size():
    assert len(buildScanStrategies(640, 480)) == 4 * 5 * 2


def test_resize_image_returns_same_object_at_native_size():
    image = np.zeros((200, 400, 3), dtype=np.uint8)
    sizes = computeScanSizes(400, 200)

    assert resizeImage(image, sizes[0]) is image
    assert resizeImage(image, sizes[1]).shape == (400, 800, 3)
