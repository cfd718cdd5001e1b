"""
Per-model protocol constants.

Everything that varies between keyboard families lives in one
:class:`ModelProfile` record per :class:`~logiled.models.Model`:
report target byte, HID++ feature indices, per-group address headers and
capacities, effect selector bytes, mode toggle commands and the USB
interrupt endpoint. The encoders in :mod:`logiled.protocol` and
:mod:`logiled.effects` only read these records.

Feature indices were captured from Logitech Gaming Software traffic; they
are firmware constants, not discovered at runtime.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from .keys import NUMPAD_KEYS, Key, KeyAddressGroup
from .models import Model, OnBoardMode, StartupMode

# Report IDs
REPORT_SHORT = 0x11   # 20-byte HID++ long report
REPORT_LONG = 0x12    # 64-byte HID++ very long report

SHORT_FRAME_SIZE = 20
LONG_FRAME_SIZE = 64

TARGET_DEVICE = 0xFF     # wired device
TARGET_RECEIVER = 0x01   # first device behind a LIGHTSPEED receiver

EP_INTERRUPT_IN = 0x82
EP_INTERRUPT_IN_RECEIVER = 0x83


class Batching(Enum):
    """How per-key colors are packed into frames."""
    NONE = "none"                        # zone-only keyboards
    GROUP_ADDRESSED = "group_addressed"  # (offset, r, g, b) per key per group
    COLOR_BATCHED = "color_batched"      # one color + up to 13 keys per frame


class AllKeysMethod(Enum):
    """How ``set_all_keys`` is carried out."""
    UNSUPPORTED = "unsupported"
    REGIONS = "regions"
    NATIVE_EFFECT = "native_effect"
    PER_KEY = "per_key"


@dataclass(frozen=True)
class ModeCommand:
    """A one-byte toggle frame.

    Frame: ``11 <target> <feature> <function> <prefix...> <wire value>``.
    ``values`` maps each accepted caller value to its wire byte; anything
    else is rejected.
    """
    feature: int
    function: int
    values: Mapping[int, int]
    prefix: bytes = b""


@dataclass(frozen=True)
class ModelProfile:
    model: Model
    target: int = TARGET_DEVICE
    batching: Batching = Batching.GROUP_ADDRESSED
    group_headers: Mapping[KeyAddressGroup, bytes] = field(default_factory=dict)
    group_bounds: Mapping[KeyAddressGroup, int] = field(default_factory=dict)
    excluded_keys: FrozenSet[Key] = frozenset()
    perkey_feature: Optional[int] = None
    commit: Optional[Tuple[int, int]] = None
    transactional: bool = True
    effect_bytes: Optional[Tuple[int, int]] = None
    effect_setup: bool = False
    has_logo_zone: bool = True
    startup: Optional[ModeCommand] = None
    on_board: Optional[ModeCommand] = None
    mr_key: Optional[ModeCommand] = None
    mn_key: Optional[ModeCommand] = None
    gkeys_mode: Optional[ModeCommand] = None
    region: Optional[Tuple[int, int]] = None
    region_count: int = 0
    all_keys: AllKeysMethod = AllKeysMethod.PER_KEY
    interrupt_endpoint: int = EP_INTERRUPT_IN

    def bound(self, group: KeyAddressGroup) -> int:
        return self.group_bounds.get(group, 0)

    def header(self, group: KeyAddressGroup) -> bytes:
        return self.group_headers.get(group, b"")


# =========================================================================
# Shared building blocks
# =========================================================================

def _identity(*values: int) -> Dict[int, int]:
    return {v: v for v in values}


_BINARY = _identity(0, 1)

_STARTUP_VALUES = _identity(*(int(m) for m in StartupMode))
_ON_BOARD_VALUES = _identity(*(int(m) for m in OnBoardMode))

_STARTUP_0D = ModeCommand(0x0D, 0x5A, _STARTUP_VALUES, prefix=b"\x00\x01")

_HEADER_LOGO = bytes([REPORT_SHORT, 0xFF, 0x0C, 0x3A, 0x00, 0x10, 0x00, 0x01])
_HEADER_INDICATORS = bytes([REPORT_LONG, 0xFF, 0x0C, 0x3A, 0x00, 0x40, 0x00, 0x05])
_HEADER_MULTIMEDIA = bytes([REPORT_LONG, 0xFF, 0x0C, 0x3A, 0x00, 0x02, 0x00, 0x05])
_HEADER_KEYS = bytes([REPORT_LONG, 0xFF, 0x0C, 0x3A, 0x00, 0x01, 0x00, 0x0E])

_HEADERS_TKL = {
    KeyAddressGroup.LOGO: _HEADER_LOGO,
    KeyAddressGroup.INDICATORS: _HEADER_INDICATORS,
    KeyAddressGroup.KEYS: _HEADER_KEYS,
}
_HEADERS_FULL = {**_HEADERS_TKL, KeyAddressGroup.MULTIMEDIA: _HEADER_MULTIMEDIA}

# Entries accepted per group before the rest is dropped
INDICATORS_BOUND = 6
MULTIMEDIA_BOUND = 6
GKEYS_BOUND = 10
KEYS_BOUND = 121

_COMMIT_0C = (0x0C, 0x5A)
_EFFECT_0D = (0x0D, 0x3C)

# Keys the G815/G915 firmware has no per-key address for
_COLOR_BATCHED_EXCLUDED = frozenset({
    Key.LOGO2, Key.GAME, Key.CAPS, Key.SCROLL, Key.NUM, Key.STOP,
    Key.G6, Key.G7, Key.G8, Key.G9,
})


def _group_addressed(model: Model, headers, logo_bound: int = 0,
                     multimedia: bool = False, excluded=frozenset(),
                     startup: bool = False) -> ModelProfile:
    bounds = {
        KeyAddressGroup.INDICATORS: INDICATORS_BOUND,
        KeyAddressGroup.KEYS: KEYS_BOUND,
    }
    if logo_bound:
        bounds[KeyAddressGroup.LOGO] = logo_bound
    if multimedia:
        bounds[KeyAddressGroup.MULTIMEDIA] = MULTIMEDIA_BOUND
    return ModelProfile(
        model=model,
        group_headers=headers,
        group_bounds=bounds,
        excluded_keys=frozenset(excluded),
        commit=_COMMIT_0C,
        effect_bytes=_EFFECT_0D,
        startup=_STARTUP_0D if startup else None,
    )


def _color_batched(model: Model, target: int, perkey: int, commit: int,
                   effect: int, on_board: int, mr: int, mn: int, gkeys: int,
                   endpoint: int = EP_INTERRUPT_IN,
                   all_keys: AllKeysMethod = AllKeysMethod.PER_KEY) -> ModelProfile:
    header = bytes([REPORT_SHORT, target, perkey, 0x1C])
    return ModelProfile(
        model=model,
        target=target,
        batching=Batching.COLOR_BATCHED,
        group_headers={group: header for group in KeyAddressGroup},
        excluded_keys=_COLOR_BATCHED_EXCLUDED,
        perkey_feature=perkey,
        commit=(commit, 0x7F),
        effect_bytes=(effect, 0x1C),
        effect_setup=True,
        on_board=ModeCommand(on_board, 0x1A, _ON_BOARD_VALUES),
        mr_key=ModeCommand(mr, 0x0C, _BINARY),
        mn_key=ModeCommand(mn, 0x1C, {1: 0x01, 2: 0x02, 3: 0x04}),
        gkeys_mode=ModeCommand(gkeys, 0x2B, _BINARY),
        all_keys=all_keys,
        interrupt_endpoint=endpoint,
    )


# =========================================================================
# Profile table
# =========================================================================

PROFILES: Dict[Model, ModelProfile] = {
    Model.G213: ModelProfile(
        model=Model.G213,
        batching=Batching.NONE,
        transactional=False,
        effect_bytes=(0x0C, 0x3C),
        has_logo_zone=False,
        startup=_STARTUP_0D,
        region=(0x0C, 0x3A),
        region_count=5,
        all_keys=AllKeysMethod.REGIONS,
    ),
    Model.G413: ModelProfile(
        model=Model.G413,
        batching=Batching.NONE,
        transactional=False,
        effect_bytes=(0x0C, 0x3C),
        has_logo_zone=False,
        all_keys=AllKeysMethod.NATIVE_EFFECT,
    ),
    Model.G410: _group_addressed(
        Model.G410, _HEADERS_TKL, excluded=NUMPAD_KEYS, startup=True,
    ),
    Model.G512: _group_addressed(Model.G512, _HEADERS_TKL),
    Model.G513: _group_addressed(Model.G513, _HEADERS_TKL),
    Model.GPRO: _group_addressed(
        Model.GPRO, _HEADERS_TKL, logo_bound=2,
        excluded={Key.LOGO2}, startup=True,
    ),
    Model.G610: _group_addressed(
        Model.G610, _HEADERS_FULL, logo_bound=2, multimedia=True,
        excluded={Key.LOGO2}, startup=True,
    ),
    Model.G810: _group_addressed(
        Model.G810, _HEADERS_FULL, logo_bound=2, multimedia=True,
        excluded={Key.LOGO2}, startup=True,
    ),
    Model.G910: ModelProfile(
        model=Model.G910,
        group_headers={
            KeyAddressGroup.LOGO: bytes([REPORT_SHORT, 0xFF, 0x0F, 0x3A, 0x00, 0x10, 0x00, 0x02]),
            KeyAddressGroup.INDICATORS: _HEADER_INDICATORS,
            KeyAddressGroup.GKEYS: bytes([REPORT_LONG, 0xFF, 0x0F, 0x3E, 0x00, 0x04, 0x00, 0x09]),
            KeyAddressGroup.KEYS: bytes([REPORT_LONG, 0xFF, 0x0F, 0x3D, 0x00, 0x01, 0x00, 0x0E]),
        },
        group_bounds={
            KeyAddressGroup.LOGO: 3,
            KeyAddressGroup.INDICATORS: INDICATORS_BOUND,
            KeyAddressGroup.GKEYS: GKEYS_BOUND,
            KeyAddressGroup.KEYS: KEYS_BOUND,
        },
        commit=(0x0F, 0x5D),
        effect_bytes=(0x10, 0x3C),
        startup=ModeCommand(0x10, 0x5E, _STARTUP_VALUES, prefix=b"\x00\x01"),
        mr_key=ModeCommand(0x0A, 0x0E, _BINARY),
        mn_key=ModeCommand(0x09, 0x1E, _identity(*range(8))),
        gkeys_mode=ModeCommand(0x08, 0x2E, _BINARY),
    ),
    Model.G815: _color_batched(
        Model.G815, TARGET_DEVICE, perkey=0x10, commit=0x10, effect=0x0F,
        on_board=0x11, mr=0x0C, mn=0x0B, gkeys=0x0A,
    ),
    Model.G915: _color_batched(
        Model.G915, TARGET_RECEIVER, perkey=0x0B, commit=0x0B, effect=0x0A,
        on_board=0x15, mr=0x13, mn=0x12, gkeys=0x11,
        endpoint=EP_INTERRUPT_IN_RECEIVER,
        # no all-keys shortcut in the receiver protocol
        all_keys=AllKeysMethod.UNSUPPORTED,
    ),
}


def get_profile(model: Model) -> Optional[ModelProfile]:
    """Protocol constants for *model*, or None when it has no mapping."""
    return PROFILES.get(model)
