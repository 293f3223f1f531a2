"""Tests for the blend operators, lerp entry points and mode dispatch."""

import numpy as np
import pytest

from blend import (
    BlendMode,
    add,
    blend,
    blend_array,
    darkest,
    lerp,
    lerp_alpha,
    lerp_amount,
    lerp_channel,
    lightest,
    multiply,
    screen,
    subtract,
)
from color import BLACK, BLUE, GREEN, GREEN_MASK, RED, RED_MASK, WHITE, alpha, blue, green, pack, red, rgb

OPERATORS = {
    BlendMode.LERP: lerp,
    BlendMode.ADD: add,
    BlendMode.SUBTRACT: subtract,
    BlendMode.MULTIPLY: multiply,
    BlendMode.SCREEN: screen,
    BlendMode.LIGHTEST: lightest,
    BlendMode.DARKEST: darkest,
}


def _channels(c):
    return (red(c), green(c), blue(c))


class TestLerpChannel:
    def test_full_weight_reaches_target(self):
        assert lerp_channel(0, RED, 255, RED_MASK) == RED_MASK

    def test_stays_in_channel_window(self):
        result = lerp_channel(WHITE, BLACK, 128, GREEN_MASK)
        assert result & ~GREEN_MASK == 0


class TestLerp:
    def test_mid_grey_from_int_alpha(self):
        result = lerp(BLACK, WHITE, 128)
        assert _channels(result) == (128, 128, 128)
        assert alpha(result) == 255

    def test_zero_amount_keeps_c1(self):
        """c2 contributes nothing to RGB, but the alphas still add up."""
        c1 = pack(10, 20, 30, 100)
        c2 = pack(200, 200, 200, 100)
        result = lerp(c1, c2, 0)
        assert _channels(result) == (10, 20, 30)
        assert alpha(result) == 200

    def test_full_amount_reaches_c2(self):
        c1 = pack(200, 90, 10, 0)
        c2 = pack(3, 160, 255, 0)
        assert _channels(lerp(c1, c2, 255)) == (3, 160, 255)

    def test_float_amount(self):
        assert lerp(BLACK, WHITE, 0.5) == 0xFF7F7F7F
        assert lerp(BLACK, WHITE, 1.0) == WHITE
        assert lerp(BLACK, WHITE, np.float32(0.5)) == 0xFF7F7F7F

    def test_default_amount_is_c2_alpha(self):
        c2 = pack(255, 255, 255, 128)
        assert lerp(BLACK, c2) == 0xFF808080
        assert lerp(BLACK, c2) == lerp(BLACK, c2, 128)

    def test_compiled_forms_agree(self):
        assert lerp_amount(RED, BLUE, 0.25) == lerp_alpha(RED, BLUE, 63)
        assert lerp(RED, BLUE, 0.25) == lerp_amount(RED, BLUE, 0.25)

    def test_floor_bias_towards_lower_target(self):
        """A zero weight still moves a channel down by one when c2 is darker."""
        assert _channels(lerp(WHITE, BLACK, 0)) == (254, 254, 254)


class TestAdd:
    def test_known_values(self):
        assert add(rgb(50, 100, 150), rgb(30, 40, 50)) == rgb(80, 140, 200)

    def test_clips_instead_of_wrapping(self):
        assert add(WHITE, WHITE) == WHITE
        assert add(rgb(200, 200, 200), rgb(200, 200, 200)) == WHITE

    def test_scales_by_c2_alpha(self):
        assert add(pack(10, 20, 30, 0), pack(200, 100, 0, 127)) == 0x7F6E461E


class TestSubtract:
    def test_known_values(self):
        assert subtract(rgb(100, 100, 100), rgb(30, 200, 0)) == rgb(70, 0, 100)

    def test_clips_at_zero(self):
        assert subtract(BLACK, WHITE) == BLACK
        assert subtract(rgb(1, 1, 1), WHITE) == BLACK

    def test_channels_clip_independently(self):
        assert subtract(rgb(0, 255, 0), rgb(255, 0, 0)) == GREEN

    def test_partial_alpha_rounding(self):
        """Red and green keep fractional bits inside their window, blue truncates."""
        assert subtract(pack(100, 100, 100, 0), pack(3, 3, 3, 127)) == pack(98, 98, 99, 127)


class TestMultiply:
    def test_white_times_black(self):
        assert multiply(WHITE, BLACK) == BLACK

    def test_white_is_identity(self):
        assert multiply(WHITE, WHITE) == WHITE
        assert multiply(rgb(12, 34, 56), WHITE) == rgb(12, 34, 56)

    def test_known_values(self):
        assert multiply(rgb(255, 128, 0), rgb(128, 255, 128)) == rgb(128, 128, 0)


class TestScreen:
    def test_white_saturates(self):
        assert screen(WHITE, rgb(40, 80, 120)) == WHITE

    def test_black_is_identity(self):
        assert screen(rgb(12, 34, 56), BLACK) == rgb(12, 34, 56)

    def test_mid_greys(self):
        # 255 - 127 * 128 / 256: red and green round the product up, blue down
        assert screen(rgb(128, 128, 128), rgb(128, 128, 128)) == rgb(191, 191, 192)


class TestLightestDarkest:
    def test_lightest_per_channel(self):
        assert lightest(pack(100, 200, 50, 0), rgb(150, 100, 50)) == rgb(150, 200, 50)

    def test_lightest_scales_c2(self):
        assert lightest(pack(120, 0, 0, 0), pack(200, 200, 200, 127)) == pack(120, 100, 100, 127)

    def test_darkest_per_channel(self):
        assert darkest(rgb(100, 200, 50), rgb(150, 100, 50)) == rgb(100, 100, 50)

    def test_darkest_opaque_black(self):
        assert darkest(WHITE, BLACK) == BLACK


class TestBlendAlpha:
    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_result_alpha_is_clipped_sum(self, mode):
        rng = np.random.default_rng(int(mode))
        for c1, c2 in rng.integers(0, 2**32, size=(300, 2)):
            c1, c2 = int(c1), int(c2)
            result = blend(c1, c2, mode)
            assert alpha(result) == min(255, alpha(c1) + alpha(c2))
            assert 0 <= result <= 0xFFFFFFFF

    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_transparent_pair_stays_transparent(self, mode):
        assert alpha(blend(0x00123456, 0x00654321, mode)) == 0


class TestBlendDispatch:
    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_dispatches_to_operator(self, mode):
        c1, c2 = pack(10, 120, 240, 90), pack(200, 60, 30, 170)
        assert blend(c1, c2, mode) == OPERATORS[mode](c1, c2)

    @pytest.mark.parametrize("mode", ["add", 1, None, 7])
    def test_unknown_mode(self, mode):
        with pytest.raises(NotImplementedError, match="Unimplemented blend mode"):
            blend(RED, GREEN, mode)


class TestBlendArray:
    @pytest.mark.parametrize("mode", list(BlendMode))
    def test_matches_scalar_form(self, mode):
        rng = np.random.default_rng(3)
        c1s = rng.integers(0, 2**32, size=100).astype(np.uint32)
        c2s = rng.integers(0, 2**32, size=100).astype(np.uint32)
        result = blend_array(c1s, c2s, mode)
        assert result.dtype == np.uint32
        assert result.tolist() == [blend(int(a), int(b), mode) for a, b in zip(c1s, c2s)]

    def test_writes_into_out(self):
        out = np.zeros(2, dtype=np.uint32)
        returned = blend_array([WHITE, RED], [BLACK, BLUE], BlendMode.ADD, out)
        assert returned is out
        assert out.tolist() == [WHITE, 0xFFFF00FF]

    def test_accepts_lists(self):
        result = blend_array([WHITE], [BLACK], BlendMode.MULTIPLY)
        assert result.tolist() == [BLACK]

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            blend_array([WHITE, BLACK], [BLACK], BlendMode.ADD)

    def test_out_shape_mismatch(self):
        with pytest.raises(ValueError):
            blend_array([WHITE], [BLACK], BlendMode.ADD, np.zeros(3, dtype=np.uint32))

    def test_unknown_mode(self):
        with pytest.raises(NotImplementedError):
            blend_array([WHITE], [BLACK], "screen")
