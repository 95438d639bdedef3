"""
Parse Errors

Typed failures raised while decoding item text. Every error names the
parser section it came from and, when known, the offending line and its
1-based line number, so a caller can log the item and move on.
"""

from typing import Optional


class ItemParseError(ValueError):
    """
    Base error for all item text decoding failures.

    Attributes:
        section: Parser section that failed ('ItemClass', 'ItemMods', ...)
        line: Offending line text, if any
        line_number: 1-based line number in the item text, if known
        detail: Description of the failure
    """

    def __init__(self, section: str, detail: str,
                 line: Optional[str] = None,
                 line_number: Optional[int] = None) -> None:
        self.section = section
        self.detail = detail
        self.line = line
        self.line_number = line_number
        super().__init__(self._format())

    def _format(self) -> str:
        where = self.section
        if self.line_number is not None:
            where = f"{where}, line {self.line_number}"
        message = f"[{where}] {self.detail}"
        if self.line is not None:
            message = f"{message}: {self.line!r}"
        return message

    def at_line(self, line_number: int) -> 'ItemParseError':
        """Fill in the line number (if unset) and return self for re-raising."""
        if self.line_number is None:
            self.line_number = line_number
            self.args = (self._format(),)
        return self


class StructuralMismatchError(ItemParseError):
    """A line does not match the grammar its section expects."""


class UnknownAffixTypeError(ItemParseError):
    """
    Mod header names an affix type outside Prefix/Suffix/Implicit/Unique.

    Attributes:
        affix_type: The unrecognised header word
    """

    def __init__(self, affix_type: str, line: Optional[str] = None,
                 line_number: Optional[int] = None) -> None:
        self.affix_type = affix_type
        super().__init__('ItemMods', f"Unknown affix type '{affix_type}'",
                         line=line, line_number=line_number)


class MalformedNumberError(ItemParseError):
    """
    A tier, value, roll bound or item level failed to parse as a number.

    Attributes:
        raw_value: The text that failed to parse
    """

    def __init__(self, section: str, raw_value: str, line: Optional[str] = None,
                 line_number: Optional[int] = None) -> None:
        self.raw_value = raw_value
        super().__init__(section, f"Malformed number '{raw_value}'",
                         line=line, line_number=line_number)


class TruncatedModBlockError(ItemParseError):
    """Input ended while a mod header was still waiting for its effect line."""

    def __init__(self, header: str, line_number: Optional[int] = None) -> None:
        super().__init__('ItemMods', 'Mod header has no effect line',
                         line=header, line_number=line_number)


class EmptyOrMissingSectionError(ItemParseError):
    """Input ended before a required section was reached."""

    def __init__(self, section: str) -> None:
        super().__init__(section, 'Unexpected end of item text')
