"""
Provider routing: failure classification and the failover state machine.
"""

from juristcu.routing.exceptions import AllProvidersExhausted
from juristcu.routing.provider_router import ProviderCredentials, ProviderRouter, ProviderState
from juristcu.routing.quota_classifier import classify, classify_error

__all__ = [
    "AllProvidersExhausted",
    "ProviderCredentials",
    "ProviderRouter",
    "ProviderState",
    "classify",
    "classify_error",
]
