"""Application-wide constants.

This module centralizes the magic strings and numbers used by the
Messenger webhook adapter so there is a single source of truth.
"""

# =============================================================================
# Facebook API
# =============================================================================

# Facebook Graph API version used for the Send API
FACEBOOK_GRAPH_API_VERSION = "v2.6"

# Base URL of the Facebook Graph API
FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Timeout for Facebook Graph API calls (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# Webhook object type that identifies a page subscription
PAGE_OBJECT_TYPE = "page"

# Mode sent by Facebook during the webhook handshake
SUBSCRIBE_MODE = "subscribe"

# Header carrying the HMAC-SHA256 signature of the raw payload
SIGNATURE_HEADER = "X-Hub-Signature-256"

# =============================================================================
# Routing Defaults
# =============================================================================

DEFAULT_WEBHOOK_PATH = "/webhook"

DEFAULT_CHANNEL_NAME = "FacebookMessenger"

# =============================================================================
# Fixed Replies
# =============================================================================

AUTHENTICATION_REPLY = "Authentication successful"

ATTACHMENT_REPLY = "Message with attachment received"

UNEXPECTED_MESSAGE_REPLY = "Message unexpected received"

# Keywords reserved for rich message bubbles, checked in this order.
# None of them is supported yet.
RICH_MESSAGE_KEYWORDS = ("image", "button", "generic", "receipt")
