from datetime import timedelta

# Endpoint defaults (staging environment)
ZINC_URL = "https://staging.zinc.cloud.cupronickel.goog/auth"
ZINC_PUBLIC_SIGNING_KEY_URL = "https://staging.zinc.cloud.cupronickel.goog/publickey"
BRASS_URL = "https://staging.brass.cloud.cupronickel.goog/addegress"
ZINC_OAUTH_SCOPES = "oauth2:https://www.googleapis.com/auth/subscriptions"
ZINC_SERVICE_TYPE = "g1"

# Used when the caller does not provide any copper hostname suffix
COPPER_HOSTNAME_SUFFIX = "g-tun.com"

CONNECTIVITY_CHECK_URL = "https://connectivitycheck.gstatic.com/generate_204"
CONNECTIVITY_CHECK_RETRY_DELAY = timedelta(seconds=15)
CONNECTIVITY_CHECK_MAX_RETRIES = 5

# Key lengths (in bits) supported by the bridge cipher suite
ALLOWED_BRIDGE_KEY_LENGTHS = frozenset({128, 256})
