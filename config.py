# config.py

# --- Traversal ---
DEFAULT_ROOT = "."          # Directory scanned when no path is given
MAX_PATH_LEN = 4096         # Longest composed path (in bytes) that is still walked
READ_CHUNK_SIZE = 4096      # Bytes read per call when hashing a file

# --- Hashing ---
HASH_SEED = 1
HASH_MULTIPLIER = 65521

# --- Manifest format ---
LINE_FORMAT = "{path} : {hash:08X}\n"
CHECKSUM_PREFIX = "Manifest checksum: "
CHECKSUM_FORMAT = CHECKSUM_PREFIX + "{hash:08X}\n"
MANIFEST_ENCODING = "utf-8"
UNREADABLE_HASH = 0         # Sentinel written for files that cannot be read

# --- Alerts / watch mode ---
WEBHOOK_URL = None          # Discord-style webhook, disabled unless given on the command line
WEBHOOK_TIMEOUT = 10        # Seconds
WATCH_INTERVAL = 1          # Seconds between observer wake-ups

# --- Build info ---
GIT_COMMIT_HASH = "unknown"
