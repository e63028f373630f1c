"""
Routing exceptions.

AllProvidersExhausted is the single signal that a scan must stop: it is
raised by the router and propagates unchanged through the evaluator to the
scanner, which converts it into a halted ScanOutcome.
"""

from juristcu.models.enums import HaltReason


class AllProvidersExhausted(Exception):
    """No provider (and no Gemini key) is left to serve requests."""

    def __init__(self, reason: HaltReason = HaltReason.QUOTA_EXHAUSTED_ALL_PROVIDERS):
        super().__init__(f"All providers exhausted: {reason.value}")
        self.reason = reason
