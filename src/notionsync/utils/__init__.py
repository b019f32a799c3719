from .retries import compute_backoff, parse_retry_after, should_retry
from .slug import sanitize_folder_name, slugify

__all__ = [
    "compute_backoff",
    "parse_retry_after",
    "should_retry",
    "sanitize_folder_name",
    "slugify",
]
