from __future__ import annotations

from typing import Final

__all__: list[str] = ["StringUtils"]

NEWLINE: Final[str] = "\n"


class StringUtils:
    """Utility class for the small amount of text shaping the commands need."""

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Note: Does not use strip(). Leading and trailing whitespace of a selection is significant.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def preserve_trailing_newline(original: str, translated: str) -> str:
        """Carry a trailing newline of the original text over to its translation.

        Translation APIs drop the final line break, which would join the replaced selection
        with the line that follows it. A newline is appended if and only if the original ends
        with one; the translated text itself is never trimmed.

        Args:
            original (str): Text that was sent for translation.
            translated (str): Text returned by the translation API.

        Returns:
            str: The text to put in place of the selection.
        """
        translated = StringUtils.ensure_str(translated)
        if StringUtils.ensure_str(original).endswith(NEWLINE):
            return translated + NEWLINE
        return translated
