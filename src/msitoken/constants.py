"""Default configuration constants for the managed identity token probe."""

# Instance metadata service
DEFAULT_METADATA_ENDPOINT = "http://169.254.169.254/metadata/identity/oauth2/token"
DEFAULT_RESOURCE = "https://database.windows.net/"
METADATA_API_VERSION = "2018-02-01"
METADATA_HEADER = ("Metadata", "true")
ACCESS_TOKEN_FIELD = "access_token"

# HTTP settings (milliseconds)
DEFAULT_TIMEOUT_MS = 30_000

# Retry settings (seconds)
DEFAULT_MAX_RETRY_COUNT = 5
DEFAULT_RETRY_TIMEOUT_S = 0
DELTA_BACKOFF_S = 2

RETRY_TIMEOUT_ERROR = (
    "Reached retry timeout limit set by MsiRetryTimeout parameter in connection string."
)
