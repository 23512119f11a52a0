"""Wire constants for the Google Photos web protocol.

The numeric keys are opaque identifiers the web UI uses to address its
internal procedures. They carry no derivable meaning and must match the
server exactly.
"""

LOGIN_URL = "https://accounts.google.com/ServiceLoginAuth?service=lh2"
PROFILE_URL = "https://plus.google.com/u/0/me"
HOME_URL = "https://photos.google.com"
DATA_URL = "https://photos.google.com/_/PhotosUi/data"
MUTATE_URL = "https://photos.google.com/_/PhotosUi/mutate"
UPLOAD_URL = "https://photos.google.com/_/upload/photos/resumable?authuser=0"

# Anti-XSSI marker prepended to every /data and /mutate response body.
RPC_PREFIX = ")]}'"
RPC_PREFIX_LENGTH = 4

ALBUM_LIST_KEY = "72930366"
PHOTO_LIST_KEY = "74806772"
ALBUM_CREATE_KEY = "79956622"
ALBUM_ITEM_REMOVE_KEY = "85381832"
VIDEO_INFO_KEY = "76647426"
VIDEO_TYPE_SENTINEL = 15658734

MUTATION_ENVELOPE = "af.maf"
MUTATION_ACTION = "af.add"

LOGIN_COOKIE = "GALX"
LOGIN_FORM_CONSTANTS: dict[str, str] = {
    "pstMsg": "1",
    "_utf8": "\u9731",
    "bgresponse": "js_disabled",
    "checkedDomains": "youtube",
    "checkConnection": "youtube:56:1",
    "PersistentCookie": "yes",
}

TOKEN_GLOBAL = "photos_PhotosUi"
TOKEN_FUNCTION = "He"
TOKEN_FIELD = "SNlM0e"
TOKEN_ACCESSOR = "wa"
TOKEN_EXPRESSION = (
    "() => {"
    f" const ui = window.{TOKEN_GLOBAL};"
    f" if (!ui || typeof ui.{TOKEN_FUNCTION} !== 'function') return null;"
    f" return ui.{TOKEN_FUNCTION}('{TOKEN_FIELD}').{TOKEN_ACCESSOR}(null);"
    " }"
)

UPLOAD_FINALIZED_STATE = "FINALIZED"
UPLOAD_INFO_KEY = "uploader_service.GoogleRupioAdditionalInfo"
UPLOAD_PROTOCOL_VERSION = "0.8"
