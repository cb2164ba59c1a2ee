"""
Core utilities shared across the run club API.

This package hosts configuration (env vars, paths, storage selection),
logging setup, the admin password check and the login rate limiter.
Routers and repositories depend on these primitives instead of reading
os.environ directly.
"""
