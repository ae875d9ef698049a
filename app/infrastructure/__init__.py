"""Shared infrastructure for the onboarding scripts.

- configuration: Settings management (settings, ConfigurationError)
- logging: structlog setup and run context
- notifications: Ordered-fallback notification dispatcher
- operations: Operation results and error classification
- persistence: Baseline snapshots and change-set detection
- resilience: Bounded retry for rate-limited calls
"""
