"""Application constants - centralized configuration values."""

# =============================================================================
# API
# =============================================================================
API_PREFIX = "/api/v1"

# =============================================================================
# Pagination
# =============================================================================
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# =============================================================================
# Video listing
# =============================================================================
VALID_VIDEO_SORT_FIELDS = ["created_at", "views", "duration", "title"]
VALID_SORT_ORDERS = ["asc", "desc"]
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_ORDER = "desc"

# =============================================================================
# Session & Security
# =============================================================================
ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"
TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"

# =============================================================================
# Limits
# =============================================================================
MAX_CONTENT_LENGTH = 5000  # comments and tweets
MAX_TITLE_LENGTH = 255

# =============================================================================
# Database pool
# =============================================================================
DB_POOL_SIZE = 10
DB_MAX_OVERFLOW = 20
DB_POOL_RECYCLE_SECONDS = 1800

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
UPLOAD_TIMEOUT = 120.0  # video uploads can be large
UPLOAD_CHUNK_SIZE = 1024 * 1024  # bytes per write when staging uploads

# =============================================================================
# External API URLs
# =============================================================================
CLOUDINARY_API_BASE_URL = "https://api.cloudinary.com/v1_1"
