"""
Infrastructure Layer

- error/: AWS error classification
- resilience/: Retry loop, state waiter and cancellation
- locking/: Named mutexes
- logging/: structlog setup
- runtime/: Resource registry and lifecycle dispatch
"""
