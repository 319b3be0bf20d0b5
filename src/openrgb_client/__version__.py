"""openrgb-client version information."""

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.1.0 - Header, command registry and controller-data decoding
# 0.2.0 - Update/resize payloads, inner length validation on every
#         length-prefixed payload, zone matrix block framed by byte length
# 0.3.0 - Session state tracking (closed after any fatal error), typed
#         error hierarchy, config file + OPENRGB_* environment overrides
