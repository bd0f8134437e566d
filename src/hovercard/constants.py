MINUTE = 60
HOUR = 60 * MINUTE

# Hover popup defaults (milliseconds for delays, seconds for fade speed).
DEFAULT_HOVER_DELAY_MS = 800
DEFAULT_FADE_DELAY_MS = 200
DEFAULT_FADE_SPEED = 0.7
DEFAULT_POPUP_WIDTH = 450

# Resource cache defaults.
DEFAULT_CACHE_TTL = HOUR
DEFAULT_CACHE_MAX_ENTRIES = 256

DEFAULT_BASE_URL = "https://www.reddit.com"
SUBREDDIT_KIND = "t5"

# Capability names consulted while composing the popup body.
FEATURE_SUBREDDIT_MANAGER = "subredditManager"
FEATURE_DASHBOARD = "dashboard"
FEATURE_FILTER = "filteReddit"

# Popup card geometry.
POPUP_PADDING = 10
POPUP_LINE_HEIGHT = 18
POPUP_HEADER_HEIGHT = 26
POPUP_BUTTON_HEIGHT = 22
POPUP_BUTTON_GAP = 8
POPUP_ANCHOR_OFFSET = 12
POPUP_LABEL_WIDTH = 150

# Hit-test layers. The popup card and its buttons sit above page links.
LAYER_PAGE = 0
LAYER_POPUP = 1

# Matches arcade.MOUSE_BUTTON_LEFT; only primary clicks operate toggles.
MOUSE_BUTTON_LEFT = 1
