"""
Supported keyboard table.

Every supported keyboard is identified by (vendor, product, interface).
The interface is the HID interface carrying the lighting feature; on
LIGHTSPEED receivers (G915) it is interface 2, everywhere else 1.

New models are added only here (and in :mod:`logiled.profiles`).
"""

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .models import Model

LOGITECH_VID = 0x046D


@dataclass(frozen=True)
class CatalogEntry:
    """One row of the device matching table."""
    vendor_id: int
    product_id: int
    interface_number: int
    model: Model


SUPPORTED_KEYBOARDS: List[CatalogEntry] = [
    CatalogEntry(LOGITECH_VID, 0xC336, 1, Model.G213),
    CatalogEntry(LOGITECH_VID, 0xC330, 1, Model.G410),
    CatalogEntry(LOGITECH_VID, 0xC33A, 1, Model.G413),
    CatalogEntry(LOGITECH_VID, 0xC342, 1, Model.G512),
    CatalogEntry(LOGITECH_VID, 0xC33C, 1, Model.G513),
    CatalogEntry(LOGITECH_VID, 0xC333, 1, Model.G610),
    CatalogEntry(LOGITECH_VID, 0xC338, 1, Model.G610),
    CatalogEntry(LOGITECH_VID, 0xC331, 1, Model.G810),
    CatalogEntry(LOGITECH_VID, 0xC337, 1, Model.G810),
    CatalogEntry(LOGITECH_VID, 0xC33F, 1, Model.G815),
    CatalogEntry(LOGITECH_VID, 0xC32B, 1, Model.G910),
    CatalogEntry(LOGITECH_VID, 0xC335, 1, Model.G910),
    CatalogEntry(LOGITECH_VID, 0xC541, 2, Model.G915),  # LIGHTSPEED receiver
    CatalogEntry(LOGITECH_VID, 0xC33E, 2, Model.G915),  # wired
    CatalogEntry(LOGITECH_VID, 0xC339, 1, Model.GPRO),
]


def find_entry(vendor_id: int, product_id: int,
               interface_number: Optional[int]) -> Optional[CatalogEntry]:
    """Return the first table entry matching the full triple, or None."""
    for entry in SUPPORTED_KEYBOARDS:
        if (entry.vendor_id == vendor_id
                and entry.product_id == product_id
                and entry.interface_number == interface_number):
            return entry
    return None


def model_for(vendor_id: int, product_id: int,
              interface_number: Optional[int]) -> Model:
    entry = find_entry(vendor_id, product_id, interface_number)
    return entry.model if entry else Model.UNKNOWN


def is_supported_pair(vendor_id: int, product_id: int) -> bool:
    """Whether (vendor, product) appears in the table on any interface."""
    return (vendor_id, product_id) in supported_ids()


def supported_ids() -> Set[Tuple[int, int]]:
    """All (vendor, product) pairs in the table (udev rule generation etc.)."""
    return {(e.vendor_id, e.product_id) for e in SUPPORTED_KEYBOARDS}
