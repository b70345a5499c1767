"""
CSV Validator for scorecard uploads.

Validates upload size and decodes the raw bytes into text.
"""

from disc_tracker.errors import InvalidRequest
from disc_tracker.utils.constants import MAX_FILE_SIZE


class CSVValidator:
    """Validate and decode uploaded CSV content"""

    MAX_FILE_SIZE = MAX_FILE_SIZE

    def validate_size(self, content: bytes) -> None:
        """Ensure file is under size limit"""
        size = len(content)
        if size > self.MAX_FILE_SIZE:
            raise InvalidRequest(
                f"CSV file exceeds 10MB limit ({size / 1024 / 1024:.1f}MB)"
            )

    def decode(self, content: bytes) -> str:
        """Decode upload bytes, stripping a UTF-8 BOM if present"""
        try:
            return content.decode('utf-8-sig')
        except UnicodeDecodeError:
            return content.decode('latin-1')
