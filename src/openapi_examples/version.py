"""Centralized version information for openapi-examples."""

# Package version - follows semantic versioning (MAJOR.MINOR.PATCH)
__version__ = "1.0.0"

# Provider API version - increment MAJOR when ExamplesProvider changes incompatibly
PROVIDER_API_VERSION = "1.0.0"
