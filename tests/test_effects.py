"""Tests for native effect frame encoding."""

import pytest

from logiled.effects import EffectEncoder, indicator_prestep_color
from logiled.exceptions import UnsupportedError
from logiled.models import (
    CYAN,
    WHITE,
    Color,
    Model,
    NativeEffect,
    NativeEffectGroup,
    NativeEffectPart,
    NativeEffectStorage,
)

RED = Color(0xFF, 0x00, 0x00)
KEYS = NativeEffectPart.KEYS
LOGO = NativeEffectPart.LOGO


def _frame(hexstr: str) -> bytes:
    return bytes.fromhex(hexstr).ljust(20, b"\x00")


class TestEffectEnums:

    def test_group_and_variation(self):
        assert NativeEffect.CWAVE.group is NativeEffectGroup.WAVES
        assert NativeEffect.CWAVE.variation == 0x03
        assert NativeEffect.RIPPLE.group is NativeEffectGroup.RIPPLE
        assert NativeEffect.OFF.variation == 0


class TestIndicatorPrestep:

    @pytest.mark.parametrize("effect", [NativeEffect.COLOR, NativeEffect.BREATHING])
    def test_requested_color(self, effect):
        assert indicator_prestep_color(effect, RED) == RED

    @pytest.mark.parametrize("effect", [
        NativeEffect.CYCLE, NativeEffect.WAVES, NativeEffect.HWAVE, NativeEffect.RIPPLE,
    ])
    def test_white(self, effect):
        assert indicator_prestep_color(effect, RED) == WHITE

    def test_off_leaves_indicators(self):
        assert indicator_prestep_color(NativeEffect.OFF, RED) is None


# =========================================================================
# Classic families
# =========================================================================

class TestClassicEffects:

    def test_g810_color_on_keys(self):
        frames = EffectEncoder(Model.G810).native_effect_frames(
            NativeEffect.COLOR, KEYS, 0, RED)
        assert frames == [_frame("11ff0d3c" "00" "01" "ff0000" "00000000" "00" "64" "00" "00")]

    def test_period_layout(self):
        (frame,) = EffectEncoder(Model.G810).native_effect_frames(
            NativeEffect.BREATHING, KEYS, 0x1388, RED, NativeEffectStorage.USER)
        assert frame[9:17] == bytes([0x13, 0x88, 0x13, 0x88, 0x00, 0x64, 0x13, 0x01])

    def test_variation_byte(self):
        (frame,) = EffectEncoder(Model.G810).native_effect_frames(
            NativeEffect.VWAVE, KEYS, 1000, RED)
        assert frame[5] == NativeEffectGroup.WAVES
        assert frame[13] == 0x02

    @pytest.mark.parametrize("effect", [
        NativeEffect.WAVES, NativeEffect.HWAVE, NativeEffect.VWAVE, NativeEffect.CWAVE,
    ])
    def test_logo_wave_becomes_cyan(self, effect):
        (frame,) = EffectEncoder(Model.G810).native_effect_frames(effect, LOGO, 5000, RED)
        assert frame == _frame("11ff0d3c" "01" "01" "00ffff" "00000000" "00" "64" "00" "00")

    def test_logo_cycle_kept(self):
        (frame,) = EffectEncoder(Model.G810).native_effect_frames(
            NativeEffect.CYCLE, LOGO, 0x0100, RED)
        assert frame[5] == NativeEffectGroup.CYCLE
        assert frame[9:11] == b"\x01\x00"

    @pytest.mark.parametrize("model,pb", [
        (Model.G213, "0c3c"),
        (Model.G413, "0c3c"),
        (Model.G410, "0d3c"),
        (Model.G512, "0d3c"),
        (Model.G513, "0d3c"),
        (Model.G610, "0d3c"),
        (Model.GPRO, "0d3c"),
        (Model.G910, "103c"),
    ])
    def test_protocol_bytes(self, model, pb):
        (frame,) = EffectEncoder(model).native_effect_frames(NativeEffect.COLOR, KEYS, 0, RED)
        assert frame[:4] == bytes.fromhex("11ff" + pb)

    @pytest.mark.parametrize("model", [Model.G213, Model.G413])
    def test_no_logo_zone(self, model):
        assert EffectEncoder(model).native_effect_frames(NativeEffect.COLOR, LOGO, 0, RED) == []

    def test_no_setup_frame(self):
        assert EffectEncoder(Model.G810).setup_frame() is None


# =========================================================================
# G815/G915
# =========================================================================

class TestFlatEffects:

    def test_setup_frame_first(self):
        frames = EffectEncoder(Model.G815).native_effect_frames(
            NativeEffect.COLOR, KEYS, 0, RED)
        assert len(frames) == 2
        assert frames[0] == _frame("11ff0f5c010303")

    def test_receiver_setup_frame(self):
        assert EffectEncoder(Model.G915).setup_frame() == _frame("11010a5c010303")

    def test_keys_part_renumbered(self):
        _, frame = EffectEncoder(Model.G815).native_effect_frames(
            NativeEffect.COLOR, KEYS, 0, RED)
        assert frame == _frame("11ff0f1c" "01" "01" "ff0000" "00000000" "00" "64" "00" "01")

    def test_keys_ripple_period(self):
        _, frame = EffectEncoder(Model.G815).native_effect_frames(
            NativeEffect.RIPPLE, KEYS, 0x1234, RED)
        assert frame[4:6] == bytes([0x01, 0x05])
        assert frame[9:13] == bytes([0x00, 0x12, 0x34, 0x00])
        assert frame[15:17] == bytes([0x12, 0x01])

    @pytest.mark.parametrize("effect,group", [
        (NativeEffect.OFF, 0x00),
        (NativeEffect.COLOR, 0x01),
        (NativeEffect.BREATHING, 0x03),
        (NativeEffect.CYCLE, 0x02),
        (NativeEffect.WAVES, 0x02),
        (NativeEffect.HWAVE, 0x02),
        (NativeEffect.RIPPLE, 0x00),
    ])
    def test_logo_group_byte(self, effect, group):
        _, frame = EffectEncoder(Model.G915).native_effect_frames(effect, LOGO, 1000, RED)
        assert frame[4] == 0x00
        assert frame[5] == group
        assert frame[16] == 0x01

    def test_logo_wave_variation_forced(self):
        _, frame = EffectEncoder(Model.G815).native_effect_frames(
            NativeEffect.CWAVE, LOGO, 1000, RED)
        assert frame[13] == 0x64

    def test_logo_waves_not_replaced_by_cyan(self):
        _, frame = EffectEncoder(Model.G815).native_effect_frames(
            NativeEffect.WAVES, LOGO, 1000, RED)
        assert frame[6:9] == RED.as_bytes()
        assert frame[6:9] != CYAN.as_bytes()

    def test_receiver_protocol_bytes(self):
        _, frame = EffectEncoder(Model.G915).native_effect_frames(
            NativeEffect.COLOR, KEYS, 0, RED)
        assert frame[:4] == bytes.fromhex("11010a1c")


# =========================================================================
# Validation
# =========================================================================

class TestEffectValidation:

    @pytest.mark.parametrize("period", [-1, 0x10000, 70000])
    def test_period_range(self, period):
        with pytest.raises(ValueError):
            EffectEncoder(Model.G810).native_effect_frames(NativeEffect.BREATHING, KEYS, period, RED)

    def test_period_max_accepted(self):
        (frame,) = EffectEncoder(Model.G810).native_effect_frames(
            NativeEffect.BREATHING, KEYS, 0xFFFF, RED)
        assert frame[9:11] == b"\xff\xff"

    def test_all_part_rejected(self):
        with pytest.raises(ValueError):
            EffectEncoder(Model.G810).native_effect_frames(
                NativeEffect.COLOR, NativeEffectPart.ALL, 0, RED)

    def test_unknown_model(self):
        with pytest.raises(UnsupportedError):
            EffectEncoder(Model.UNKNOWN).native_effect_frames(NativeEffect.COLOR, KEYS, 0, RED)
