"""Constants shared by the consent flow and the tool surface."""

# Consent form field names (wire contract with the rendered HTML form)
FORM_ACTION_FIELD = "action"
FORM_REQUEST_FIELD = "oauthReqInfo"
FORM_API_KEY_FIELD = "improvadoApiKey"

# Session property carrying the verified key into tool calls
PROPS_API_KEY = "improvadoApiKey"

OAUTH_SCOPES: list[dict[str, str]] = [
    {
        "name": "improvado_api",
        "description": "Access your Improvado data using your API key",
    },
]

USER_ID_PREFIX = "improvado_user_"
USER_LABEL = "Improvado User"

INVALID_REQUEST_BODY = "INVALID REQUEST"
INVALID_API_KEY_MESSAGE = "Invalid API key. Please try again with a valid API key."
VERIFICATION_UNAVAILABLE_MESSAGE = (
    "We could not reach the Improvado verification service. "
    "Your API key was not rejected; please try again in a moment."
)
MISSING_API_KEY_MESSAGE = (
    "❌ Improvado API key is not configured. "
    "Please go through the authorization process again."
)

PAGE_TITLE_HOME = "Improvado MCP - Home"
PAGE_TITLE_AUTHORIZE = "Improvado MCP - Authorization"
PAGE_TITLE_STATUS = "Improvado MCP - Authorization Status"

REQUEST_ID_HEADER = "x-request-id"
