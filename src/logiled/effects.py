"""
Native (firmware-run) lighting effects.

Effect frame, 20 bytes::

    11 <target> <pb0> <pb1> <part> <group> R G B
    <p_hi> <p_lo> <p_hi> <p_lo> <variation> 64 <p_hi> <storage> 00 00 00

``pb0 pb1`` is the model's effect feature/function pair and ``p`` the
period in milliseconds (big endian). The G815/G915 firmware wants a setup
frame ahead of every effect and renumbers the part and logo group bytes.
"""

import logging
from typing import List, Optional

from .exceptions import UnsupportedError
from .models import (
    CYAN,
    WHITE,
    Color,
    NativeEffect,
    NativeEffectGroup,
    NativeEffectPart,
    NativeEffectStorage,
)
from .protocol import ProtocolEncoder

log = logging.getLogger(__name__)

MAX_PERIOD_MS = 0xFFFF
EFFECT_CONSTANT = 0x64

# Setup frame function and payload (G815/G915)
SETUP_FUNCTION = 0x5C
SETUP_PAYLOAD = (0x01, 0x03, 0x03)

# Byte positions inside the effect frame
_PART = 4
_GROUP = 5
_PERIOD = 9
_VARIATION = 13
_STORAGE = 16

_WAVE_VARIANTS = (NativeEffect.HWAVE, NativeEffect.VWAVE, NativeEffect.CWAVE)


def indicator_prestep_color(effect: NativeEffect, color: Color) -> Optional[Color]:
    """Color the indicator LEDs get before an effect is applied to the
    whole keyboard, None when they are left alone."""
    group = effect.group
    if group in (NativeEffectGroup.COLOR, NativeEffectGroup.BREATHING):
        return color
    if group in (NativeEffectGroup.CYCLE, NativeEffectGroup.WAVES,
                 NativeEffectGroup.RIPPLE):
        return WHITE
    return None


def _logo_group_byte(effect: NativeEffect) -> int:
    group = effect.group
    if group is NativeEffectGroup.BREATHING:
        return 0x03
    if group in (NativeEffectGroup.WAVES, NativeEffectGroup.CYCLE):
        return 0x02
    if group in (NativeEffectGroup.RIPPLE, NativeEffectGroup.OFF):
        return 0x00
    return 0x01


class EffectEncoder(ProtocolEncoder):
    """Adds native effect frames to :class:`ProtocolEncoder`."""

    def setup_frame(self) -> Optional[bytes]:
        profile = self.require_profile()
        if not profile.effect_setup or profile.effect_bytes is None:
            return None
        return self._short(profile.effect_bytes[0], SETUP_FUNCTION, *SETUP_PAYLOAD)

    def native_effect_frames(self, effect: NativeEffect, part: NativeEffectPart,
                             period_ms: int, color: Color,
                             storage: NativeEffectStorage = NativeEffectStorage.NONE
                             ) -> List[bytes]:
        """Frames applying *effect* to a single *part* (keys or logo).

        Empty when the model has no separately lit logo, in which case a
        logo request is a no-op.

        Raises:
            ValueError: ``period_ms`` outside 0..65535 or ``part`` is ALL.
            UnsupportedError: the model has no effect command.
        """
        if not 0 <= period_ms <= MAX_PERIOD_MS:
            raise ValueError(f"period out of range: {period_ms} ms")
        if part is NativeEffectPart.ALL:
            raise ValueError("part ALL must be split into keys and logo")

        profile = self.require_profile()
        if profile.effect_bytes is None:
            raise UnsupportedError(f"{self.model.value} has no native effects")
        if part is NativeEffectPart.LOGO and not profile.has_logo_zone:
            log.debug("%s: no logo zone, effect skipped", self.model.value)
            return []

        if (not profile.effect_setup and part is NativeEffectPart.LOGO
                and effect.group is NativeEffectGroup.WAVES):
            # Logo LEDs cannot run waves; show them static cyan instead
            effect, color, period_ms = NativeEffect.COLOR, CYAN, 0

        frame = bytearray(self._build(effect, part, period_ms, color, storage))
        if profile.effect_setup:
            self._renumber(frame, effect, part, period_ms)

        frames = []
        setup = self.setup_frame()
        if setup is not None:
            frames.append(setup)
        frames.append(bytes(frame))
        return frames

    def _build(self, effect, part, period_ms, color, storage) -> bytes:
        pb0, pb1 = self.require_profile().effect_bytes
        p_hi, p_lo = period_ms >> 8, period_ms & 0xFF
        return self._short(
            pb0, pb1, int(part), int(effect.group),
            color.red, color.green, color.blue,
            p_hi, p_lo, p_hi, p_lo,
            effect.variation, EFFECT_CONSTANT, p_hi, int(storage),
        )

    @staticmethod
    def _renumber(frame: bytearray, effect: NativeEffect,
                  part: NativeEffectPart, period_ms: int) -> None:
        p_hi, p_lo = period_ms >> 8, period_ms & 0xFF
        frame[_STORAGE] = 0x01
        if part is NativeEffectPart.KEYS:
            frame[_PART] = 0x01
            if effect.group is NativeEffectGroup.RIPPLE:
                frame[_PERIOD:_PERIOD + 4] = bytes((0x00, p_hi, p_lo, 0x00))
        else:
            frame[_PART] = 0x00
            frame[_GROUP] = _logo_group_byte(effect)
            if effect in _WAVE_VARIANTS:
                frame[_VARIATION] = EFFECT_CONSTANT
