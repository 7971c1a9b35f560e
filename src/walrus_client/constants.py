"""Constants for walrus-client."""

# Public testnet endpoints
DEFAULT_AGGREGATOR_URL = "https://aggregator.testnet.walrus.atalma.io"
DEFAULT_PUBLISHER_URL = "https://publisher.walrus-01.tududes.com"

# Store defaults
DEFAULT_EPOCHS = 1

# Configuration file (~/.walrus-client/config.yaml)
CONFIG_DIR = ".walrus-client"
CONFIG_FILE = "config.yaml"

# Environment overrides
ENV_AGGREGATOR_URL = "WALRUS_AGGREGATOR_URL"
ENV_PUBLISHER_URL = "WALRUS_PUBLISHER_URL"
ENV_EPOCHS = "WALRUS_EPOCHS"
