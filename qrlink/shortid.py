"""Short ID generation utilities."""

import secrets
import string
from typing import Optional


class ShortIdGenerator:
    """Generate random short IDs for links."""

    # URL-safe alphabet (64 symbols, 6 bits of entropy per character)
    ALPHABET = string.ascii_letters + string.digits + "_-"

    def __init__(self, default_length: int = 8):
        """Initialize short ID generator.

        Args:
            default_length: Length of generated IDs
        """
        if default_length < 1:
            raise ValueError("Short ID length must be positive")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short ID.

        Uses the ``secrets`` CSPRNG, so consecutive IDs are unpredictable.

        Args:
            length: Length of the ID (uses default if not specified)

        Returns:
            Random short ID
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.ALPHABET) for _ in range(length))

    @staticmethod
    def is_valid_format(short_id: str) -> bool:
        """Check if an ID only uses the URL-safe alphabet."""
        return bool(short_id) and all(c in ShortIdGenerator.ALPHABET for c in short_id)
