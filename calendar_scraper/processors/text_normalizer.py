"""Header text normalization ahead of pattern splitting."""

import re
import unicodedata


class TextNormalizer:
    """Normalizes calendar header text so delimiter splitting is reliable."""

    # Spacing and invisible characters only; dashes and quotes are kept
    CHAR_REPLACEMENTS = {
        "\u00a0": " ",  # Non-breaking space
        "\u202f": " ",  # Narrow non-breaking space
        "\u200b": "",  # Zero-width space
        "\ufeff": "",  # BOM
    }

    def normalize_unicode(self, text: str) -> str:
        """Normalize unicode to NFC form."""
        return unicodedata.normalize("NFC", text)

    def replace_special_chars(self, text: str) -> str:
        """
        Replace non-breaking and zero-width characters.

        Dashes are left alone, so only a literal " - " separates header
        fields.

        Args:
            text: Input text

        Returns:
            Text with replacements applied
        """
        for char, replacement in self.CHAR_REPLACEMENTS.items():
            text = text.replace(char, replacement)
        return text

    def remove_control_characters(self, text: str) -> str:
        """Drop control characters, turning line breaks and tabs into spaces."""
        cleaned = []
        for char in text:
            if char in "\n\r\t":
                cleaned.append(" ")
            elif unicodedata.category(char) != "Cc":
                cleaned.append(char)
        return "".join(cleaned)

    def collapse_whitespace(self, text: str) -> str:
        """Collapse whitespace runs into single spaces and trim the ends."""
        return re.sub(r"\s+", " ", text).strip()

    def normalize(self, text: str) -> str:
        """
        Apply all normalizations.

        Args:
            text: Raw header text as rendered by the page

        Returns:
            Single-line normalized text
        """
        if not text:
            return ""

        text = self.normalize_unicode(text)
        text = self.replace_special_chars(text)
        text = self.remove_control_characters(text)
        return self.collapse_whitespace(text)
