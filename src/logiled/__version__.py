"""logiled version information."""

__version__ = "0.9.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.1.0 - G810 per-key colors over hidapi
# 0.2.0 - G910 G-keys, MR/MN toggles, startup mode
# 0.3.0 - pyusb backend with kernel driver detach/reattach
# 0.4.0 - G213 regions, G410 tenkeyless key filtering
# 0.5.0 - Native effects (color, breathing, cycle, waves)
# 0.6.0 - G815 color-batched protocol, on-board mode
# 0.7.0 - G915 (LIGHTSPEED receiver on interface 2), ripple effect
# 0.8.0 - Per-model profile table replaces per-command model switches
# 0.9.0 - Runtime backend selection, XDG config, serial filter on open
