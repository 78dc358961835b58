"""Internal constants shared across the library."""

BASE_URL = "https://android.github.io/kotlin-multiplatform-samples/fruitties-api"
USER_AGENT = "pyfruitties/0.1"
DEFAULT_DB_PATH = "sharedfruits.db"
DEFAULT_PAGE_NUMBER = 0
DEFAULT_REQUEST_TIMEOUT = 30.0
MEMORY_DB_PATH = ":memory:"
