"""Constants for gust."""

# Project configuration directory (inside the git work tree)
GUST_DIR = ".gust"
CONFIG_FILE = "config.yaml"

# Defaults
DEFAULT_GITREF = "HEAD"
DEFAULT_OUTPUT = "./gust_generated"
DEFAULT_FALLBACK = "now"
FALLBACK_POLICIES = ("now", "reference")

# Output layout (inside the output directory)
ENTRIES_DIR = "entries"
ENTRY_SUFFIX = ".md"
LISTING_FILE = "listing.json"

# Environment overrides
GITREF_ENV = "GUST_GITREF"
