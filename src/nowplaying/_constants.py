"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Staleness / tamper suppression (milliseconds)
# ------------------------------------------------------------------

DEFAULT_STALE_TTL_MS = 15_000
DEFAULT_TAMPER_TTL_MS = 12_000

# Players refreshed within this multiple of the stale TTL are preferred
# over long-silent ones during player selection.
PLAYER_FRESH_FACTOR = 3

# ------------------------------------------------------------------
# Bridge timers (milliseconds)
# ------------------------------------------------------------------

DEFAULT_MPRIS_TICK_MS = 1_000
DEFAULT_MPRIS_SCAN_MS = 5_000

# Rank given to players that match no configured preference.
UNRANKED = 999

# ------------------------------------------------------------------
# MPRIS / D-Bus names
# ------------------------------------------------------------------

MPRIS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_PATH = "/org/mpris/MediaPlayer2"
MPRIS_ROOT_IFACE = "org.mpris.MediaPlayer2"
MPRIS_PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"
DBUS_PROPERTIES_IFACE = "org.freedesktop.DBus.Properties"
DBUS_NAME = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"

# General-purpose browsers: web playback (YouTube, YouTube Music) reaches
# MPRIS through one of these rather than a dedicated application.
BROWSER_TERMS: tuple[str, ...] = ("firefox", "chrome", "chromium", "brave", "vivaldi", "edge")
