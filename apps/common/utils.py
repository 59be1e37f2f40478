"""
Common utilities for Journal Desk.
"""
import os

from django.conf import settings


def journal_setting(name):
    """Read one key of the ``JOURNAL_DESK`` settings dict."""
    return settings.JOURNAL_DESK[name]


class FileValidator:
    """Utility for manuscript upload validation."""

    @classmethod
    def validate_file(cls, file):
        """Return ``(is_valid, message)`` for an uploaded file."""
        allowed = journal_setting('SUBMISSION_FILE_TYPES')
        max_size = journal_setting('MAX_SUBMISSION_SIZE')

        extension = os.path.splitext(file.name)[1].lower()
        if extension not in allowed:
            return False, f"File type not allowed. Allowed types: {', '.join(allowed)}"

        if file.size > max_size:
            return False, f"File too large. Maximum size: {max_size // (1024 * 1024)}MB"

        return True, "File is valid"
