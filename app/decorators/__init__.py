from app.decorators.metrics import timed
from app.decorators.with_retry import TRANSIENT_ERRORS, with_retry

__all__ = [
    "timed",
    "with_retry",
    "TRANSIENT_ERRORS",
]
