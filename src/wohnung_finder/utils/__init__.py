from .logging import setup_logging
from .retry import retry_with_backoff

__all__ = ["setup_logging", "retry_with_backoff"]
