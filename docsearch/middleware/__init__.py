"""HTTP middleware: timeout and request ID.

Applied in main app; order matters (last added = outermost).
"""

from docsearch.middleware.request_id import RequestIDMiddleware
from docsearch.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
