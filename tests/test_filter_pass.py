"""
End-to-end tests for process_image, the host-facing operation.
"""

import base64

import pytest

from kernel_filter import (
    DegenerateImage,
    InvalidKernel,
    Kernel,
    MalformedInput,
    ProcessedImage,
    process_image,
)
from kernel_filter.pipeline.filter_pass import get_default_services

SHARPEN = [0, -1, 0, -1, 5, -1, 0, -1, 0]


def pixel_at(result: ProcessedImage, x: int, y: int):
    offset = (y * result.width + x) * 4
    return list(result.data[offset:offset + 4])


def test_box_blur_scenario(solid_rgba):
    result = process_image([1 / 9] * 9, solid_rgba(3, 3, (128, 128, 128, 255)), 3, 3)

    assert (result.width, result.height) == (3, 3)
    assert pixel_at(result, 1, 1) == [128, 128, 128, 255]
    border = [pixel_at(result, x, y) for y in range(3) for x in range(3) if (x, y) != (1, 1)]
    assert border == [[0, 0, 0, 0]] * 8


def test_box_blur_through_multiplier(solid_rgba):
    result = process_image([1] * 9, solid_rgba(3, 3, (128, 128, 128, 255)), 3, 3, multiplier=1 / 9)
    assert pixel_at(result, 1, 1) == [128, 128, 128, 255]


def test_sharpen_scenario(solid_rgba):
    result = process_image(SHARPEN, solid_rgba(4, 4, (255, 255, 255, 255)), 4, 4)

    for y in (1, 2):
        for x in (1, 2):
            assert pixel_at(result, x, y) == [255, 255, 255, 255]
    assert pixel_at(result, 0, 0) == [0, 0, 0, 0]
    assert pixel_at(result, 3, 2) == [0, 0, 0, 0]


def test_accepts_kernel_object_and_list_input():
    data = [50, 60, 70, 80] * 9
    result = process_image(Kernel.identity(), data, 3, 3)
    assert pixel_at(result, 1, 1) == [50, 60, 70, 80]


def test_dimensions_preserved(noisy_pixels):
    result = process_image(SHARPEN, noisy_pixels, 7, 5)
    assert (result.width, result.height) == (7, 5)
    assert len(result.data) == len(noisy_pixels)


def test_malformed_input():
    with pytest.raises(MalformedInput):
        process_image(SHARPEN, bytes(10), 4, 4)


def test_degenerate_image():
    with pytest.raises(DegenerateImage):
        process_image(SHARPEN, bytes(4), 1, 1)


def test_invalid_kernel_checked_before_buffer():
    with pytest.raises(InvalidKernel):
        process_image([1, 2, 3], bytes(10), 4, 4)


def test_invalid_multiplier(solid_rgba):
    with pytest.raises(InvalidKernel):
        process_image(SHARPEN, solid_rgba(3, 3, (1, 1, 1, 1)), 3, 3, multiplier=float("nan"))


def test_to_dict_encodings(solid_rgba):
    result = process_image(SHARPEN, solid_rgba(3, 3, (1, 2, 3, 4)), 3, 3)

    as_list = result.to_dict()
    assert as_list["width"] == 3 and as_list["height"] == 3
    assert as_list["data"] == list(result.data)

    assert base64.b64decode(result.to_dict("base64")["data"]) == result.data

    with pytest.raises(ValueError):
        result.to_dict("hex")


def test_default_services_are_shared():
    raster_service, convolution_service = get_default_services()
    assert get_default_services()[1] is convolution_service
    assert get_default_services()[0] is raster_service
