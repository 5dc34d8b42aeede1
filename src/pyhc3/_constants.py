"""Internal constants shared across the library."""

QUICK_APP_INTERFACE = "quickApp"
QUICK_APP_CHILD_INTERFACE = "quickAppChild"

DEVICES_ENDPOINT = "/api/devices"
REFRESH_STATES_ENDPOINT = "/api/refreshStates"
QUICK_APP_ENDPOINT = "/api/quickApp"
DEVICE_UI_PATH = "/mobile/devices"

# ------------------------------------------------------------------
# Long-poll protocol values
# ------------------------------------------------------------------

#: Seconds the hub may hold a refreshStates request open.
POLL_SERVER_TIMEOUT = 30
#: Client-side timeout; must exceed the server wait window.
POLL_CLIENT_TIMEOUT = 35.0
#: Fixed delay before retrying a failed poll.
POLL_BACKOFF_SECONDS = 5.0

# ------------------------------------------------------------------
# Event kinds the reconciler acts on
# ------------------------------------------------------------------

DEVICE_REMOVED_EVENT = "DeviceRemovedEvent"
DEVICE_CHANGED_ROOM_EVENT = "DeviceChangedRoomEvent"
DEVICE_CREATED_EVENT = "DeviceCreatedEvent"
DEVICE_MODIFIED_EVENT = "DeviceModifiedEvent"
QUICK_APP_FILES_CHANGED_EVENT = "QuickAppFilesChangedEvent"

RELEVANT_EVENT_TYPES: frozenset[str] = frozenset(
    {
        DEVICE_REMOVED_EVENT,
        DEVICE_CHANGED_ROOM_EVENT,
        DEVICE_CREATED_EVENT,
        DEVICE_MODIFIED_EVENT,
        QUICK_APP_FILES_CHANGED_EVENT,
    }
)

# ------------------------------------------------------------------
# QuickApp files
# ------------------------------------------------------------------

FILE_NAME_MIN_LENGTH = 3
DEFAULT_FILE_TYPE = "lua"
