"""Application-wide constants and configuration values."""

# Name of the package, the logger, and the user folder under ~/Documents
APP_NAME = "drivekit"

# Environment variables
DEBUG_ENV_VAR = "DRIVEKIT_DEBUG"
HOME_ENV_VAR = "DRIVEKIT_HOME"
SESSION_ENV_VAR = "DRIVEKIT_SESSION_ID"

# MIME types used when talking to Drive and when choosing which files to copy into a deck
PNG_MIME_TYPE = "image/png"
PPTX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)

# The local drive mirror maps file extensions to MIME types for listing by type.
EXTENSION_MIME_TYPES: dict[str, str] = {
    ".png": PNG_MIME_TYPE,
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".ini": "text/plain",
    ".txt": "text/plain",
    ".pptx": PPTX_MIME_TYPE,
}

# Slide layout name requested for every new image slide; falls back to the layout with the fewest placeholders.
BLANK_LAYOUT_NAME = "Blank"

# Identifier fallback thresholds (see identifiers.py)
ID_FALLBACK_MIN_LENGTH = 21  # the last path segment must be longer than 20 chars
FILE_ID_MIN_LENGTH = 25

# Default report settings for the config-report pipeline
DEFAULT_REPORT_SHEET = "DC2DC Level"
DEFAULT_REPORT_HEADER: list[str] = [
    "Band Name",
    "DC2DC Level Table",
    "DC2DC Level Value",
]
DEFAULT_REPORT_KEYS: list[str] = [
    f"Pa control table{table} dc2dc level Num{num}"
    for num in range(6)
    for table in (0, 1)
]

# User-facing messages, shared by the pipelines and their tests.
# The {cell} fields are filled in with the configured input cells.
MSG_DECK_INPUTS_MISSING = (
    "Please enter the Google Drive folder URL in cell {folder_cell} and the "
    "Google Slides presentation URL in cell {presentation_cell}."
)
MSG_INVALID_FOLDER_URL = "Invalid Google Drive folder URL in {cell}."
MSG_INVALID_PRESENTATION_URL = "Invalid Google Slides presentation URL in {cell}."
MSG_IMAGES_INSERTED = "Successfully inserted {count} PNG images into the presentation."
MSG_NO_IMAGES = "No PNG images found in the specified folder."
MSG_INI_INPUT_MISSING = (
    "Please provide the Google Drive link to the ini file in cell {cell}."
)
MSG_INVALID_INI_URL = "Invalid Google Drive file link in cell {cell}."
MSG_REPORT_WRITTEN = "Wrote {count} rows from {sections} sections to sheet '{sheet}'."
MSG_NO_SECTIONS = "No sections found in the ini file; wrote only the header to sheet '{sheet}'."
MSG_UNEXPECTED_ERROR = "An error occurred: {error}"

# Fallback for get_debug_mode() in utils
DEBUG_MODE_DEFAULT = False  # Hard-coded default
