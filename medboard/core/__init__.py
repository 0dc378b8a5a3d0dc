"""Core: configuration, exception handlers, lifespan, rate limiting."""
