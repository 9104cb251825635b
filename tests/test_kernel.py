"""
Tests for the Kernel value object.
"""

import math

import numpy as np
import pytest

from kernel_filter.exceptions import InvalidKernel
from kernel_filter.models.kernel import Kernel


class TestConstruction:
    def test_weights_are_stored_as_floats(self):
        kernel = Kernel((0, -1, 0, -1, 5, -1, 0, -1, 0))
        assert kernel.weights == (0.0, -1.0, 0.0, -1.0, 5.0, -1.0, 0.0, -1.0, 0.0)
        assert all(isinstance(w, float) for w in kernel.weights)

    @pytest.mark.parametrize("count", [0, 8, 10])
    def test_wrong_weight_count(self, count):
        with pytest.raises(InvalidKernel):
            Kernel((1.0,) * count)

    @pytest.mark.parametrize("bad", ["abc", None, math.nan, math.inf, -math.inf, True])
    def test_rejects_non_finite_or_non_numeric(self, bad):
        weights = [0.0] * 9
        weights[4] = bad
        with pytest.raises(InvalidKernel, match="position 5"):
            Kernel(tuple(weights))

    def test_numeric_strings_are_accepted(self):
        kernel = Kernel.from_sequence(["1", "0.5", "-2", "0", "0", "0", "0", "0", "0"])
        assert kernel.weights[:3] == (1.0, 0.5, -2.0)

    def test_from_sequence_rejects_scalars_and_strings(self):
        with pytest.raises(InvalidKernel):
            Kernel.from_sequence(5)
        with pytest.raises(InvalidKernel):
            Kernel.from_sequence("123456789")

    def test_from_rows_is_row_major(self):
        kernel = Kernel.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        assert kernel.weights == tuple(float(v) for v in range(1, 10))
        assert kernel.weight(0, 2) == 3.0
        assert kernel.weight(2, 0) == 7.0

    def test_from_rows_rejects_ragged_grid(self):
        with pytest.raises(InvalidKernel):
            Kernel.from_rows([[1, 2, 3], [4, 5], [7, 8, 9]])

    def test_kernel_is_immutable(self):
        kernel = Kernel.identity()
        with pytest.raises(AttributeError):
            kernel.weights = (0.0,) * 9


class TestScaling:
    def test_scaled_multiplies_every_weight(self):
        kernel = Kernel((1,) * 9).scaled(0.5)
        assert kernel.weights == (0.5,) * 9

    def test_scaled_returns_new_kernel(self):
        original = Kernel.identity()
        scaled = original.scaled(3)
        assert original.weight(1, 1) == 1.0
        assert scaled.weight(1, 1) == 3.0

    @pytest.mark.parametrize("bad", [math.nan, math.inf, "x", None])
    def test_invalid_multiplier(self, bad):
        with pytest.raises(InvalidKernel, match="multiplier"):
            Kernel.identity().scaled(bad)


def test_as_array_layout():
    kernel = Kernel.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    matrix = kernel.as_array()
    assert matrix.shape == (3, 3)
    assert matrix.dtype == np.float32
    assert matrix[1, 0] == 4.0


def test_invalid_kernel_is_a_value_error():
    assert issubclass(InvalidKernel, ValueError)
