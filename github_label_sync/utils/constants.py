"""Constants shared across the label synchronization workflows."""

DEFAULT_GITHUB_API_URL = "https://api.github.com"

# Upper bound on repositories reconciled when a single label event fires.
DEFAULT_EVENT_MAX_REPOSITORIES = 50

# Upper bound on repositories reconciled by a bulk resync.
DEFAULT_BULK_MAX_REPOSITORIES = 100

# Upper bound on labels read from the source repository by a bulk resync.
DEFAULT_MAX_LABELS = 100

# Number of target repositories reconciled at once for a single label event.
DEFAULT_MAX_CONCURRENCY = 10

# GitHub REST API maximum page size.
GITHUB_PAGE_SIZE = 100
