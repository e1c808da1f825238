"""Process-wide request quota."""

from askdb.quota.limiter import RateLimiter, create_counter_store, reset_password_matches

__all__ = ["RateLimiter", "create_counter_store", "reset_password_matches"]
