"""Shared constants for routegate."""

PACKAGE_NAME = "routegate"
PACKAGE_VERSION = "0.1.0"

# Denial defaults
DEFAULT_DENIED_STATUS = 403
DEFAULT_DENIED_MESSAGE = "You are unauthorized to perform the requested action"

# Route naming conventions
RESOURCE_MARKER = "Resource"  # suffix of resource-binding class names
ACTIONS_SEPARATOR = "/actions."  # end of the handler package, start of the action
ACTION_SEPARATOR = "."  # resource.action within a single token

# Logging defaults
DEFAULT_LOG_LEVEL = "INFO"

# Config discovery
CONFIG_ENV_VAR = "ROUTEGATE_CONFIG"
