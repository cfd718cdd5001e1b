"""
Key addressing: which protocol byte a logical key is written as, and
which frame header addresses its group, for a given keyboard model.

Group-addressed keyboards (G410 … G910) take the raw offset byte of the
key inside a group frame. The G815/G915 firmware uses a single flat
address space instead, reached through fixed per-group adjustments.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .keys import MODIFIER_KEYS, Key, KeyAddressGroup
from .models import KeyValue, Model
from .profiles import Batching, ModelProfile, get_profile

log = logging.getLogger(__name__)

# Flat address adjustments (G815/G915)
FLAT_LOGO_DELTA = 0xD1
FLAT_INDICATORS_DELTA = 0x98
FLAT_GKEYS_DELTA = 0xB3
FLAT_KEYS_DELTA = -0x03
FLAT_MODIFIERS_DELTA = -0x78

FLAT_MULTIMEDIA = {
    Key.PLAY: 0x9B,
    Key.MUTE: 0x9C,
    Key.NEXT: 0x9D,
    Key.PREV: 0x9E,
}

_FLAT_GROUP_DELTA = {
    KeyAddressGroup.LOGO: FLAT_LOGO_DELTA,
    KeyAddressGroup.INDICATORS: FLAT_INDICATORS_DELTA,
    KeyAddressGroup.GKEYS: FLAT_GKEYS_DELTA,
    KeyAddressGroup.KEYS: FLAT_KEYS_DELTA,
}


def group_base_address(model: Model, group: KeyAddressGroup) -> bytes:
    """Leading bytes of a frame addressing *group* on *model*.

    Empty when the model has no per-key addressing for that group.
    """
    profile = get_profile(model)
    if profile is None:
        return b""
    return profile.header(group)


def _flat_offset(key: Key) -> Optional[int]:
    if key in FLAT_MULTIMEDIA:
        return FLAT_MULTIMEDIA[key]
    if key in MODIFIER_KEYS:
        return key.offset + FLAT_MODIFIERS_DELTA
    delta = _FLAT_GROUP_DELTA.get(key.group)
    if delta is None:
        return None
    return key.offset + delta


def profile_offset(profile: ModelProfile, key: Key) -> Optional[int]:
    """Protocol byte for *key* under *profile*, None if unsupported."""
    if key in profile.excluded_keys:
        return None
    if profile.batching is Batching.COLOR_BATCHED:
        return _flat_offset(key)
    if profile.batching is Batching.GROUP_ADDRESSED:
        group = key.group
        if profile.bound(group) and profile.header(group):
            return key.offset
    return None


def protocol_offset(model: Model, key: Key) -> Optional[int]:
    """Protocol byte the firmware of *model* expects for *key*.

    Returns None when the key cannot be addressed on that model (e.g. the
    numeric pad on a tenkeyless board); such keys are dropped, never
    encoded.
    """
    profile = get_profile(model)
    if profile is None:
        return None
    return profile_offset(profile, key)


def partition_keys(profile: ModelProfile,
                   assignments: Iterable[KeyValue]) -> Dict[KeyAddressGroup, List[KeyValue]]:
    """Split *assignments* into address groups for a group-addressed model.

    Model exclusions and per-group capacity are applied while
    partitioning: once a group holds its bound, further keys for it are
    dropped. Input order is preserved inside each group.
    """
    groups: Dict[KeyAddressGroup, List[KeyValue]] = {g: [] for g in KeyAddressGroup}
    dropped = 0
    for kv in assignments:
        group = kv.key.group
        bucket = groups[group]
        if profile_offset(profile, kv.key) is None or len(bucket) >= profile.bound(group):
            dropped += 1
            continue
        bucket.append(kv)
    if dropped:
        log.debug("%s: dropped %d key(s) outside model capacity",
                  profile.model.value, dropped)
    return groups
