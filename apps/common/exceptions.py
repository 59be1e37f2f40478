"""
Exceptions shared across Journal Desk apps.
"""
from rest_framework import status


class TransitionRejected(Exception):
    """
    Base class for every refused state change.

    ``reason`` is the short machine-readable text returned in the
    ``error`` field of the response envelope; ``detail`` adds context
    for humans.
    """
    reason = 'transition rejected'
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reason=None, detail=None):
        if reason:
            self.reason = reason
        self.detail = detail
        super().__init__(self.reason)

    def __str__(self):
        if self.detail:
            return f"{self.reason}: {self.detail}"
        return self.reason
