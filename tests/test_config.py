"""Tests for upsampling run parameters."""
import numpy as np
import pytest
from flow_upsample.config import UpsampleConfig


class TestUpsampleConfig:

    def test_defaults(self):
        config = UpsampleConfig(64, 48)
        assert config.scale_x is None
        assert config.scale_y is None
        assert config.display is False

    def test_parse_input_parameter(self):
        config = UpsampleConfig(10, 10).parse_input_parameter(
            {'x': 2.0, 'scale_y': 3.0, 'w': 20, 'unknown': 1}
        )
        assert config.scale_x == 2.0
        assert config.scale_y == 3.0
        assert config.width == 20
        assert not hasattr(config, 'unknown')

    def test_effective_scales_inferred(self):
        sx, sy = UpsampleConfig(512, 488).effective_scales(128, 122)
        assert sx == pytest.approx(4.0)
        assert sy == pytest.approx(4.0)

    def test_effective_scales_explicit(self):
        config = UpsampleConfig(512, 488, scale_x=5.0, scale_y=-1.0)
        sx, sy = config.effective_scales(100, 244)
        assert sx == 5.0
        assert sy == pytest.approx(2.0)

    def test_validate_accepts_numpy_ints(self):
        UpsampleConfig(np.int64(4), np.int32(3), np.float32(1.5)).validate()

    @pytest.mark.parametrize('width,height', [
        (None, 4), (4, None), (0, 4), (4, -2), (2.5, 4), (True, 4), ('4', 4),
    ])
    def test_validate_rejects_bad_size(self, width, height):
        with pytest.raises(ValueError):
            UpsampleConfig(width, height).validate()

    def test_validate_rejects_bad_scale(self):
        with pytest.raises(ValueError, match='scale_x'):
            UpsampleConfig(4, 4, scale_x='2').validate()

    def test_nonpositive_scale_is_allowed(self):
        UpsampleConfig(4, 4, scale_x=0.0, scale_y=-1.0).validate()
