"""
LedKeyboard: the public lighting API.

Wraps a :class:`SessionManager` and the frame encoders. Opening raises
on failure; every lighting command returns ``True``/``False`` and logs
why it failed.

Usage::

    from logiled import LedKeyboard, Color, Key

    with LedKeyboard() as kbd:
        kbd.open()
        kbd.set_all_keys(Color(0, 0, 255))
        kbd.set_key(Key.ESC, Color(255, 0, 0))
        kbd.commit()
"""

import functools
import logging
from typing import List, Optional, Sequence

from .effects import EffectEncoder, indicator_prestep_color
from .exceptions import UnsupportedError
from .keys import ALL_KEYS_ORDER, Key, KeyGroup, keys_in_group
from .models import (
    BLACK,
    Color,
    DeviceInfo,
    KeyValue,
    Model,
    NativeEffect,
    NativeEffectPart,
    NativeEffectStorage,
    OnBoardMode,
    StartupMode,
)
from .profiles import AllKeysMethod
from .session import SessionManager
from .transport import KeyboardTransport

log = logging.getLogger(__name__)


def _command(func):
    """Turn unsupported-command errors into a logged ``False``."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if not self.is_open:
            log.warning("%s: no keyboard open", func.__name__)
            return False
        try:
            return func(self, *args, **kwargs)
        except UnsupportedError as e:
            log.warning("%s rejected: %s", func.__name__, e)
            return False
    return wrapper


class LedKeyboard:
    """Controls the lighting of one Logitech G-series keyboard."""

    def __init__(self, transport: Optional[KeyboardTransport] = None,
                 session: Optional[SessionManager] = None):
        self._session = session or SessionManager(transport)

    # -- Session -------------------------------------------------------

    def list_keyboards(self) -> List[DeviceInfo]:
        return self._session.list_devices()

    def open(self, vendor_id: int = 0, product_id: int = 0, serial: str = "") -> DeviceInfo:
        """Open a keyboard; see :meth:`SessionManager.open` for the filter."""
        return self._session.open(vendor_id, product_id, serial)

    def close(self) -> bool:
        return self._session.close()

    @property
    def is_open(self) -> bool:
        return self._session.is_open

    @property
    def current_device(self) -> Optional[DeviceInfo]:
        return self._session.current_device

    @property
    def current_model(self) -> Model:
        return self._session.current_model

    @property
    def _encoder(self) -> EffectEncoder:
        return EffectEncoder(self.current_model)

    def _send_all(self, frames: Sequence[bytes]) -> bool:
        # Every frame is attempted even after a failure
        ok = True
        for frame in frames:
            ok = self._session.send(frame) and ok
        return ok

    def _send_each(self, frames: Sequence[bytes]) -> bool:
        # Stops at the first failure
        for frame in frames:
            if not self._session.send(frame):
                return False
        return True

    # -- Per-key -------------------------------------------------------

    def set_key(self, key: Key, color: Color) -> bool:
        return self.set_keys([KeyValue(key, color)])

    @_command
    def set_keys(self, assignments: Sequence[KeyValue]) -> bool:
        """Write key colors. Keys the model cannot address are skipped.

        Takes effect after :meth:`commit` on transactional models.
        """
        if not assignments:
            log.warning("set_keys: nothing to set")
            return False
        return self._send_all(self._encoder.key_frames(assignments))

    def set_group_keys(self, group: KeyGroup, color: Color) -> bool:
        return self.set_keys([KeyValue(key, color) for key in keys_in_group(group)])

    @_command
    def set_all_keys(self, color: Color) -> bool:
        """Light every key with *color*. On the G413 this reports the result
        of the native color effect it uses."""
        encoder = self._encoder
        method = encoder.require_profile().all_keys
        if method is AllKeysMethod.REGIONS:
            return self._send_each([encoder.region_frame(region, color)
                                    for region in encoder.region_numbers()])
        if method is AllKeysMethod.NATIVE_EFFECT:
            return self.set_native_effect(NativeEffect.COLOR, NativeEffectPart.KEYS,
                                          0, color, NativeEffectStorage.NONE)
        if method is AllKeysMethod.PER_KEY:
            return self.set_keys([KeyValue(key, color)
                                  for group in ALL_KEYS_ORDER
                                  for key in keys_in_group(group)])
        raise UnsupportedError(f"{self.current_model.value} cannot light all keys at once")

    @_command
    def set_region(self, region: int, color: Color) -> bool:
        return self._session.send(self._encoder.region_frame(region, color))

    @_command
    def commit(self) -> bool:
        frame = self._encoder.commit_frame()
        if frame is None:
            return True
        return self._session.send(frame)

    # -- Modes ---------------------------------------------------------

    @_command
    def set_startup_mode(self, mode: StartupMode) -> bool:
        return self._session.send(self._encoder.startup_frame(mode))

    @_command
    def set_on_board_mode(self, mode: OnBoardMode) -> bool:
        return self._session.send(self._encoder.on_board_frame(mode))

    @_command
    def set_mr_key(self, value: int) -> bool:
        return self._session.send(self._encoder.mr_key_frame(value))

    @_command
    def set_mn_key(self, value: int) -> bool:
        return self._session.send(self._encoder.mn_key_frame(value))

    @_command
    def set_gkeys_mode(self, value: int) -> bool:
        return self._session.send(self._encoder.gkeys_mode_frame(value))

    # -- Native effects ------------------------------------------------

    @_command
    def set_native_effect(self, effect: NativeEffect, part: NativeEffectPart,
                          period_ms: int = 0, color: Color = BLACK,
                          storage: NativeEffectStorage = NativeEffectStorage.NONE) -> bool:
        """Start a firmware effect on the keys, the logo, or both.

        For ``NativeEffectPart.ALL`` the indicator LEDs are first set to
        a matching color and committed, then keys and logo are programmed.

        Raises:
            ValueError: ``period_ms`` does not fit in 16 bits.
        """
        encoder = self._encoder
        if part is not NativeEffectPart.ALL:
            frames = encoder.native_effect_frames(effect, part, period_ms, color, storage)
            if not frames:
                return True
            *setup, effect_frame = frames
            for frame in setup:
                if not self._session.send(frame):
                    log.warning("Effect setup frame failed on %s", self.current_model.value)
            return self._session.send(effect_frame)

        indicator_color = indicator_prestep_color(effect, color)
        if indicator_color is not None:
            if not self.set_group_keys(KeyGroup.INDICATORS, indicator_color):
                return False
            if not self.commit():
                return False

        if not self.set_native_effect(effect, NativeEffectPart.KEYS,
                                      period_ms, color, storage):
            return False
        return self.set_native_effect(effect, NativeEffectPart.LOGO,
                                      period_ms, color, storage)

    # -- Context manager -----------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
