"""
Shared utilities for the user-type access layer.

This package aggregates the building blocks used by the resolution service:

- config: Settings via pydantic-settings
- logging: Structured logging with correlation context
- metrics: Prometheus counters
- errors: Canonical error classifications and responses
- result: Value-or-error results
- retry: Backoff retry executor

Do not import from service_* packages into shared/.
"""
