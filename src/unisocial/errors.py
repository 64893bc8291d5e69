"""Exception types raised by the Unisocial client"""

from typing import List, Optional


class UnisocialError(Exception):
    """Base class for every error this package raises on purpose"""


class ApiError(UnisocialError):
    """The backend answered with a non-2xx status"""

    def __init__(self, status_code: int, message: str, path: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"HTTP {status_code}{where}: {message}")


class UnauthorizedError(ApiError):
    """The token is missing, expired or rejected (HTTP 401)"""


class CyclicCommentGraphError(UnisocialError):
    """Parent references in a comment list loop back on themselves

    Attributes:
        cycle: Comment ids on the loop, in parent-walk order
    """

    def __init__(self, cycle: List[int]):
        self.cycle = list(cycle)
        chain = " -> ".join(str(comment_id) for comment_id in self.cycle + self.cycle[:1])
        super().__init__(f"Comment parent references form a cycle: {chain}")
