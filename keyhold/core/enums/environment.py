"""Deployment environment (``ENVIRONMENT``).

Development logs at DEBUG so handler spans (``span_completed``) are
visible; every other environment logs at INFO.
"""

from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"
