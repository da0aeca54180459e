"""Drawing bridge constants."""

# Sync state given to every imported element
SYNC_STATE_SAVED = "saved"

# Layer visibility values
LAYER_VISIBILITIES = ("visible", "hidden", "locked")
DEFAULT_LAYER_VISIBILITY = "visible"
DEFAULT_LAYER_OPACITY = 1.0
DEFAULT_LAYER_NAME_PREFIX = "Layer"

# Reverse color transforms fall back to black on malformed input
DEFAULT_HEX_COLOR = "#000000"

# Placeholder used when synthesizing info.name / info.description on export
UNKNOWN_LAYER_PLACEHOLDER = "unknown"

# Length of the random suffix of generated element ids
GENERATED_ID_SUFFIX_LENGTH = 9
