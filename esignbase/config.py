DEFAULT_BASE_URL = "https://app.esignbase.com/"

# OAuth path (relative to base URL)
OAUTH_TOKEN_PATH = "oauth2/token"

# Resource endpoints live under /api/
API_ROOT = "api"

# Request timeouts (seconds)
DEFAULT_TIMEOUT = 15.0
TOKEN_TIMEOUT = 15.0

# Document listing defaults
DEFAULT_DOCUMENTS_LIMIT = 20
DEFAULT_DOCUMENTS_OFFSET = 0

# Environment variables read by ESignBaseClient.from_env()
ENV_CLIENT_ID = "ESIGNBASE_CLIENT_ID"
ENV_CLIENT_SECRET = "ESIGNBASE_CLIENT_SECRET"
ENV_GRANT_TYPE = "ESIGNBASE_GRANT_TYPE"
ENV_SCOPE = "ESIGNBASE_SCOPE"
ENV_USERNAME = "ESIGNBASE_USERNAME"
ENV_PASSWORD = "ESIGNBASE_PASSWORD"
ENV_BASE_URL = "ESIGNBASE_BASE_URL"
