"""Cancellation token and error implementations; import from ``base.cancellation``."""
