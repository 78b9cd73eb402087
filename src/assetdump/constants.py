"""Constants for assetdump."""

# Watch mode polling period (seconds)
DEFAULT_PERIOD = 1.0

# Snapshot cache file naming
SNAPSHOT_PREFIX = "assetdump_watch_"
SNAPSHOT_HASH_LENGTH = 7

# Mode for directories created under the output root
DIR_MODE = 0o777

CONFIG_FILE = "assetdump.toml"
DEFAULT_MANIFEST = "assets.toml"
DEFAULT_WRITE_TO = "public"

UNKNOWN_ROOT = "[unknown root]"
UNKNOWN_PATH = "[unknown path]"
