"""Tests for argument validation and keyword -> policy resolution."""

import warnings

import numpy as np
import pytest

from lumen_errors import InvalidArgumentError, PolicyConflictWarning
from lumen_policies import (
    resolve_policies,
    resolve_scale,
    resolve_tone_map,
    validate_flag,
    validate_image,
    validate_number,
)
from lumen_scaling import AutoNormalize, ExplicitScale, NoScale, max_scale_factor
from lumen_tonemap import FactorToneMap, NoToneMap, ThresholdToneMap


class TestValidation:
    """Tests for the validate_* helpers."""

    @pytest.mark.parametrize("value", [0, 1, 2.5, np.float32(0.5), np.int64(3)])
    def test_accepts_real_numbers(self, value):
        assert validate_number(value, "x") == float(value)

    @pytest.mark.parametrize("value", [True, np.bool_(False), "1", None, 1 + 2j, [1.0]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(InvalidArgumentError, match="x must be a real number"):
            validate_number(value, "x")

    @pytest.mark.parametrize("value", [True, False, np.bool_(True)])
    def test_accepts_flags(self, value):
        assert validate_flag(value, "flag") is bool(value)

    @pytest.mark.parametrize("value", [0, 1, "yes", None])
    def test_rejects_non_flags(self, value):
        with pytest.raises(InvalidArgumentError, match="flag must be a bool"):
            validate_flag(value, "flag")

    @pytest.mark.parametrize("dtype", [np.uint8, np.int32, np.float32, np.float64])
    def test_accepts_numeric_images(self, dtype):
        assert validate_image(np.zeros((2, 2, 3), dtype=dtype)).shape == (2, 2, 3)

    def test_accepts_nested_lists(self):
        assert validate_image([[[0.1, 0.2, 0.3]]]).shape == (1, 1, 3)

    @pytest.mark.parametrize("image", [
        np.zeros((2, 2, 3), dtype=bool),
        np.zeros((2, 2, 3), dtype=complex),
        np.array([[["a", "b", "c"]]]),
        "image",
    ])
    def test_rejects_non_numeric_images(self, image):
        with pytest.raises(InvalidArgumentError):
            validate_image(image)

    @pytest.mark.parametrize("shape", [(4, 3), (2, 2, 4), (1, 2, 2, 3)])
    def test_rejects_wrong_shape(self, shape):
        with pytest.raises(InvalidArgumentError, match="shape"):
            validate_image(np.zeros(shape))


class TestResolveToneMap:
    """Tests for resolve_tone_map precedence."""

    def test_defaults_disable(self):
        assert resolve_tone_map(0, 0) == NoToneMap()

    def test_threshold(self):
        assert resolve_tone_map(2.0, 0) == ThresholdToneMap(2.0)

    def test_factor(self):
        assert resolve_tone_map(0, 3) == FactorToneMap(3.0)

    def test_non_positive_values_disable(self):
        assert resolve_tone_map(-1.0, float("nan")) == NoToneMap()

    def test_threshold_wins_with_warning(self):
        with pytest.warns(PolicyConflictWarning, match="tone_map_factor"):
            policy = resolve_tone_map(2.0, 3.0)
        assert policy == ThresholdToneMap(2.0)


class TestResolveScale:
    """Tests for resolve_scale precedence."""

    def test_defaults(self):
        assert resolve_scale(0, False) == NoScale()

    def test_auto_normalize(self):
        assert resolve_scale(0, True) == AutoNormalize(enabled=True)

    def test_explicit(self):
        assert resolve_scale(0.5, False) == ExplicitScale(0.5)

    def test_explicit_wins_with_warning(self):
        with pytest.warns(PolicyConflictWarning, match="is_scale"):
            policy = resolve_scale(0.5, True)
        assert policy == ExplicitScale(0.5)


class TestResolvePolicies:

    def test_no_warning_without_conflict(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            tone_map, scale = resolve_policies(tone_map_factor=2.0, is_scale=True)
        assert tone_map == FactorToneMap(2.0)
        assert scale == AutoNormalize(enabled=True)

    def test_validates_everything_before_warning(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with pytest.raises(InvalidArgumentError, match="is_scale"):
                resolve_policies(tone_map_threshold=1.0, tone_map_factor=1.0,
                                 is_scale="no")


class TestScalePolicies:
    """Tests for the scale policies in isolation."""

    def test_max_scale_factor(self):
        assert max_scale_factor(np.array([[0.5, 4.0], [1.0, 2.0], [0.0, -1.0]])) == 0.25

    def test_max_scale_factor_black(self):
        assert max_scale_factor(np.zeros((3, 4))) == 1.0
        assert max_scale_factor(np.full((3, 2), -0.5)) == 1.0

    def test_explicit_scale_rejects_non_positive(self):
        with pytest.raises(InvalidArgumentError):
            ExplicitScale(0)

    def test_no_scale_matches_disabled_auto_normalize(self):
        primaries = np.array([[0.2, 0.8], [0.1, 0.4], [0.0, 0.3]])
        a = NoScale().apply(primaries)
        b = AutoNormalize(enabled=False).apply(primaries)
        np.testing.assert_array_equal(a[1], b[1])
        assert a[2] == b[2]


class TestWarningAttribution:
    """Conflict warnings point at the frame that called the public entry point."""

    def test_resolve_tone_map(self):
        with pytest.warns(PolicyConflictWarning) as record:
            resolve_tone_map(1.0, 2.0)
        assert record[0].filename == __file__

    def test_resolve_scale(self):
        with pytest.warns(PolicyConflictWarning) as record:
            resolve_scale(1.0, True)
        assert record[0].filename == __file__

    def test_resolve_policies(self):
        with pytest.warns(PolicyConflictWarning) as record:
            resolve_policies(tone_map_threshold=1.0, tone_map_factor=2.0)
        assert record[0].filename == __file__
