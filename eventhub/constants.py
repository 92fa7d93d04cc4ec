"""Global constants for the eventhub application."""

# Collection names
GROUPS_COLLECTION = "groups"
JOINED_GROUPS_COLLECTION = "joinedGroups"
USERS_COLLECTION = "users"
ARTICLES_COLLECTION = "articles"
COMMENTS_COLLECTION = "comments"

FIRESTORE_BATCH_LIMIT = 400
# Firestore rejects document ids longer than this many bytes
MAX_DOCUMENT_ID_BYTES = 1500

# Ownership field pairs, probed in order: (email field, subject id field)
OWNERSHIP_FIELD_PAIRS = (
    ("userEmail", "userId"),
    ("creatorEmail", "creatorId"),
    ("authorEmail", "authorId"),
)
OWNERSHIP_IDENTITY_FIELDS = tuple(
    field for pair in OWNERSHIP_FIELD_PAIRS for field in pair
)
# Never accepted from a client on update
PROTECTED_FIELDS = ("id", "_id", "createdAt")
# Characters Firestore reads as field-path syntax in update() keys
FIELD_PATH_CHARACTERS = frozenset(".`~*/[]")

# Placeholders and defaults
DEFAULT_CATEGORY = "General"
GROUP_PLACEHOLDER_IMAGE = "https://via.placeholder.com/40?text=No+Image"
ARTICLE_PLACEHOLDER_COVER = "https://via.placeholder.com/800x400?text=No+Image"
AVATAR_PLACEHOLDER = "https://via.placeholder.com/40"
UNKNOWN_CREATOR_NAME = "Unknown User"
ANONYMOUS_AUTHOR_NAME = "Anonymous"
DEFAULT_USER_NAME = "No Name"

# Connection guard defaults
STORE_CONNECT_RETRIES = 5
STORE_CONNECT_DELAY = 2.0
STORE_BACKOFF_FACTOR = 1.5
STORE_PING_TIMEOUT = 5.0

# Headers accepted for the trusted fallback identity, in lookup order
FALLBACK_EMAIL_HEADERS = ("X-User-Email", "user-email")
FALLBACK_UID_HEADERS = ("X-User-UID", "user-uid")
CORS_ALLOWED_HEADERS = (
    "Content-Type",
    "Authorization",
    "X-User-Email",
    "X-User-UID",
    "user-email",
    "user-uid",
)
