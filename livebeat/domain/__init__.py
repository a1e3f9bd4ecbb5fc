"""Domain layer for livebeat.

Contains the liveness state and the error taxonomy. The domain layer
has no dependencies on HTTP, asyncio scheduling, or logging setup.
"""
