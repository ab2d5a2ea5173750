"""
Registry limits.

These bound every stored field and the per-farm audit history. They are
part of the persisted layout other ledgers read, so they are not settings.
"""

MAX_HISTORY_ENTRIES = 50
MAX_SHARE_PERCENTAGE = 100

ACTOR_MAX_LENGTH = 128

FARM_NAME_MAX_LENGTH = 100
FARM_LOCATION_MAX_LENGTH = 200

CATEGORY_MAX_LENGTH = 50
MAX_TAGS = 10
TAG_MAX_LENGTH = 20

CERTIFICATION_LEVEL_MAX_LENGTH = 50
CERTIFICATION_NOTES_MAX_LENGTH = 500

HISTORY_ACTION_MAX_LENGTH = 50
HISTORY_DETAILS_MAX_LENGTH = 200

COLLABORATOR_ROLE_MAX_LENGTH = 50
MAX_PERMISSIONS = 5
PERMISSION_MAX_LENGTH = 20

STATUS_MAX_LENGTH = 20
DEFAULT_FARM_STATUS = 'Pending'

# History actions
ACTION_REGISTERED = 'Registered'
ACTION_UPDATED_DETAILS = 'Updated Details'
ACTION_CERTIFIED = 'Certified'
ACTION_REVOKED = 'Revoked'
ACTION_ADDED_COLLABORATOR = 'Added Collaborator'
ACTION_STATUS_UPDATED = 'Status Updated'
ACTION_SET_REVENUE_SHARE = 'Set Revenue Share'
