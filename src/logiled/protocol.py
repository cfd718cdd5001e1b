"""
HID++ lighting frame encoder.

Builds the fixed-size report frames each keyboard family expects:
per-key color batches, zone (region) color, commit, startup mode,
on-board mode and the MR/MN/G-key toggles. Native effects are in
:mod:`logiled.effects`.

Frame layout rules:
    • byte 0 is the report ID (0x11 short / 0x12 long)
    • frames are zero padded to 20 (short) or 64 (long) bytes
    • encoding past the frame size is a programming error (ValueError)

Per-key batching comes in two shapes, chosen by the model profile:

Group-addressed (G410, G512, G513, G610, G810, G910, G Pro)::

    [8-byte group header] + (offset, R, G, B) * n      n <= (size - 8) / 4

Color-batched (G815, G915)::

    [11 target feature 6C] [R G B] [offset] * n [FF]   n <= 13
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from .exceptions import UnsupportedError
from .key_addressing import partition_keys, profile_offset
from .keys import KeyAddressGroup
from .models import Color, KeyValue, Model, OnBoardMode, StartupMode
from .profiles import (
    LONG_FRAME_SIZE,
    REPORT_SHORT,
    SHORT_FRAME_SIZE,
    Batching,
    ModeCommand,
    ModelProfile,
    get_profile,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

# Color-batched per-key write (function 0x6C of the per-key feature)
PERKEY_FUNCTION = 0x6C
MAX_KEYS_PER_COLOR = 13
KEY_LIST_TERMINATOR = 0xFF

# Group-addressed frames
GROUP_HEADER_SIZE = 8
GROUP_ENTRY_SIZE = 4   # offset, R, G, B

# Zone frame: 11 FF 0C 3A <region> 01 R G B
REGION_COLOR_MODE = 0x01


def pad_frame(data: Iterable[int], size: int = SHORT_FRAME_SIZE) -> bytes:
    """Zero-pad *data* to *size* bytes.

    Raises:
        ValueError: If *data* is already longer than *size*.
    """
    frame = bytes(data)
    if len(frame) > size:
        raise ValueError(f"frame overflow: {len(frame)} bytes > {size}")
    return frame.ljust(size, b"\x00")


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split *items* into consecutive slices of at most *size* entries."""
    return [items[i:i + size] for i in range(0, len(items), size)]


def frame_size_for(group: KeyAddressGroup) -> int:
    """Logo frames are short reports, every other group uses long ones."""
    return SHORT_FRAME_SIZE if group is KeyAddressGroup.LOGO else LONG_FRAME_SIZE


# =========================================================================
# Per-key batching strategies
# =========================================================================

class BatchingStrategy(ABC):
    """Packs key/color assignments into frames for one protocol family."""

    @abstractmethod
    def frames(self, profile: ModelProfile,
               assignments: Sequence[KeyValue]) -> List[bytes]:
        """Encode *assignments*; unsupported keys are left out silently."""


class ZoneOnlyStrategy(BatchingStrategy):
    """Keyboards without per-key lighting encode nothing."""

    def frames(self, profile, assignments):
        return []


class GroupAddressedStrategy(BatchingStrategy):

    def frames(self, profile, assignments):
        result = []
        groups = partition_keys(profile, assignments)
        for group, entries in groups.items():
            header = profile.header(group)
            if not entries or not header:
                continue
            size = frame_size_for(group)
            per_frame = (size - GROUP_HEADER_SIZE) // GROUP_ENTRY_SIZE
            for chunk in chunked(entries, per_frame):
                data = bytearray(header)
                for kv in chunk:
                    data.append(kv.key.offset)
                    data += kv.color.as_bytes()
                result.append(pad_frame(data, size))
        return result


class ColorBatchedStrategy(BatchingStrategy):
    """One frame per (color, ≤13 keys).

    Keys are grouped by exact color, then split into chunks of 13.
    Unsupported keys are skipped inside their chunk, so N keys of one
    color always give ceil(N / 13) frames.
    """

    def frames(self, profile, assignments):
        by_color: Dict[Color, List[KeyValue]] = {}
        for kv in assignments:
            by_color.setdefault(kv.color, []).append(kv)

        header = bytes([REPORT_SHORT, profile.target,
                        profile.perkey_feature, PERKEY_FUNCTION])
        result = []
        for color in sorted(by_color, key=lambda c: c.packed):
            for chunk in chunked(by_color[color], MAX_KEYS_PER_COLOR):
                data = bytearray(header)
                data += color.as_bytes()
                for kv in chunk:
                    offset = profile_offset(profile, kv.key)
                    if offset is not None:
                        data.append(offset)
                if len(data) < SHORT_FRAME_SIZE:
                    data.append(KEY_LIST_TERMINATOR)
                result.append(pad_frame(data, SHORT_FRAME_SIZE))
        return result


STRATEGIES: Dict[Batching, BatchingStrategy] = {
    Batching.NONE: ZoneOnlyStrategy(),
    Batching.GROUP_ADDRESSED: GroupAddressedStrategy(),
    Batching.COLOR_BATCHED: ColorBatchedStrategy(),
}


# =========================================================================
# Encoder
# =========================================================================

class ProtocolEncoder:
    """Frame builder bound to one keyboard model.

    Every ``*_frame`` method raises :class:`UnsupportedError` when the
    model has no mapping for the command or the value is out of range.
    """

    def __init__(self, model: Model):
        self.model = model
        self.profile: Optional[ModelProfile] = get_profile(model)

    def require_profile(self) -> ModelProfile:
        if self.profile is None:
            raise UnsupportedError(f"no lighting protocol for model {self.model.value}")
        return self.profile

    def _short(self, *body: int) -> bytes:
        return pad_frame((REPORT_SHORT, self.require_profile().target) + body)

    # -- Per-key -------------------------------------------------------

    def key_frames(self, assignments: Sequence[KeyValue]) -> List[bytes]:
        """Frames carrying *assignments*, possibly none.

        Raises:
            ValueError: If *assignments* is empty.
        """
        if not assignments:
            raise ValueError("no keys to encode")
        profile = self.require_profile()
        return STRATEGIES[profile.batching].frames(profile, list(assignments))

    # -- Commit --------------------------------------------------------

    def commit_frame(self) -> Optional[bytes]:
        """Frame that makes buffered per-key writes visible.

        None for non-transactional keyboards, which apply writes at once.
        """
        profile = self.require_profile()
        if not profile.transactional:
            return None
        if profile.commit is None:
            raise UnsupportedError(f"{self.model.value} has no commit command")
        return self._short(*profile.commit)

    # -- Zones ---------------------------------------------------------

    def region_frame(self, region: int, color: Color) -> bytes:
        profile = self.require_profile()
        if profile.region is None:
            raise UnsupportedError(f"{self.model.value} has no lighting regions")
        if not 1 <= region <= profile.region_count:
            raise UnsupportedError(
                f"region {region} out of range 1-{profile.region_count}")
        feature, function = profile.region
        return self._short(feature, function, region, REGION_COLOR_MODE,
                           color.red, color.green, color.blue)

    def region_numbers(self) -> range:
        profile = self.require_profile()
        return range(1, profile.region_count + 1)

    # -- Mode toggles --------------------------------------------------

    def _mode_frame(self, command: Optional[ModeCommand], value: int,
                    name: str) -> bytes:
        if command is None:
            raise UnsupportedError(f"{self.model.value} has no {name} command")
        if value not in command.values:
            raise UnsupportedError(f"{name} value {value} not accepted by {self.model.value}")
        return self._short(command.feature, command.function,
                           *command.prefix, command.values[value])

    def startup_frame(self, mode: StartupMode) -> bytes:
        return self._mode_frame(self.require_profile().startup, int(mode), "startup mode")

    def on_board_frame(self, mode: OnBoardMode) -> bytes:
        return self._mode_frame(self.require_profile().on_board, int(mode), "on-board mode")

    def mr_key_frame(self, value: int) -> bytes:
        return self._mode_frame(self.require_profile().mr_key, value, "MR key")

    def mn_key_frame(self, value: int) -> bytes:
        return self._mode_frame(self.require_profile().mn_key, value, "MN key")

    def gkeys_mode_frame(self, value: int) -> bytes:
        return self._mode_frame(self.require_profile().gkeys_mode, value, "G-keys mode")
