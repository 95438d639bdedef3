"""
Item Text Parser

Parses the text the game client puts on the clipboard when an item is
copied (advanced copy, with mod headers) into an Item.

Clipboard Structure:
    Item Class: Belts
    Rarity: Rare
    Dusk Clasp
    Leather Belt
    --------
    Requirements:
    Level: 44
    --------
    Item Level: 75
    --------
    { Implicit Modifier — Life }
    +31(25-40) to maximum Life (implicit)
    --------
    { Prefix Modifier "Phantasm's" (Tier: 3) — Defences, Evasion }
    73(68-79)% increased Evasion Rating

Sections are read strictly in order, never going back:
    ItemClass -> ItemRarity -> ItemName -> ItemStats -> ItemMods
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional, Tuple

from models import AffixType, Item, ItemMod, ItemName, Rarity, StatLine
from mod_parser import ModLineParser
from parse_errors import (
    EmptyOrMissingSectionError,
    ItemParseError,
    MalformedNumberError,
    StructuralMismatchError,
    TruncatedModBlockError,
)

logger = logging.getLogger(__name__)


class ParseSection(Enum):
    """Parser sections, in the order they are entered."""
    ITEM_CLASS = 'ItemClass'
    ITEM_RARITY = 'ItemRarity'
    ITEM_NAME = 'ItemName'
    ITEM_STATS = 'ItemStats'
    ITEM_MODS = 'ItemMods'


# Section reported missing when the text runs out while in a given section
MISSING_SECTION = {
    ParseSection.ITEM_CLASS: ParseSection.ITEM_CLASS,
    ParseSection.ITEM_RARITY: ParseSection.ITEM_RARITY,
    ParseSection.ITEM_NAME: ParseSection.ITEM_STATS,
}


# =============================================================================
# LINE PATTERNS
# =============================================================================
# "Key: Value" with a non-empty value, e.g. "Item Class: Belts"
KEY_VALUE_PATTERN = re.compile(r'(?P<left>[^:]+):(?P<right>.+)')

# First number of a stat value: "+20% (augmented)" -> 20, "1.50" -> 1.50
STAT_NUMBER_PATTERN = re.compile(r'\d+(?:\.\d+)?')

# Trailing suffix of a magic item name, split at the last " of ":
#   "Leather Belt of the Whelpling"   -> "Leather Belt", "of the Whelpling"
#   "Crown of Thorns of the Fox"      -> "Crown of Thorns", "of the Fox"
MAGIC_SUFFIX_PATTERN = re.compile(r'^(?P<base>.+) (?P<suffix>of .+)$')

ITEM_CLASS_KEY = 'Item Class'
RARITY_KEY = 'Rarity'
ITEM_LEVEL_KEY = 'Item Level'
SOCKETS_KEY = 'Sockets'

MAX_ITEM_LEVEL = 255


@dataclass(frozen=True)
class ParserOptions:
    """Tunable parser behaviour, passed explicitly to ItemParser."""
    separator: str = '--------'
    capture_qualifiers: bool = True


@dataclass
class _ItemBuilder:
    """Values collected while walking the sections."""
    item_class: str = ''
    rarity_text: str = ''
    name_lines: List[str] = field(default_factory=list)
    stats: List[StatLine] = field(default_factory=list)
    ilvl: int = 0
    sockets: str = ''
    mods: List[ItemMod] = field(default_factory=list)


class ItemParser:
    """
    Parser for clipboard item text.

    Stateless between calls: every parse_item() builds a fresh Item.
    """

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()
        self.mod_parser = ModLineParser(capture_qualifiers=self.options.capture_qualifiers)

    def parse_item(self, text: str) -> Item:
        """
        Parse a full item text block.

        Args:
            text: Clipboard text of one item

        Returns:
            Item

        Raises:
            ItemParseError: on any section failure (no partial Item)
        """
        separator = self.options.separator
        lines = [line.strip() for line in text.strip().splitlines()]

        builder = _ItemBuilder()
        section = ParseSection.ITEM_CLASS
        pending_header: Optional[Tuple[int, str]] = None

        for index, line in enumerate(lines):
            line_number = index + 1
            if not line:
                continue

            if section == ParseSection.ITEM_CLASS:
                builder.item_class = self._parse_key_value(line, ITEM_CLASS_KEY, section, line_number)
                section = self._enter(ParseSection.ITEM_RARITY)

            elif section == ParseSection.ITEM_RARITY:
                builder.rarity_text = self._parse_key_value(line, RARITY_KEY, section, line_number)
                section = self._enter(ParseSection.ITEM_NAME)

            elif section == ParseSection.ITEM_NAME:
                if line == separator:
                    if not builder.name_lines:
                        raise StructuralMismatchError(section.value, 'Empty name block',
                                                      line=line, line_number=line_number)
                    section = self._enter(ParseSection.ITEM_STATS)
                else:
                    builder.name_lines.append(line)

            elif section == ParseSection.ITEM_STATS:
                if line == separator:
                    # Stat blocks have their own separators; only one
                    # followed by a mod header starts the mods section
                    next_line = self._peek(lines, index)
                    if next_line is not None and next_line.startswith('{'):
                        section = self._enter(ParseSection.ITEM_MODS)
                    continue
                self._parse_stat_line(line, builder, line_number)

            elif section == ParseSection.ITEM_MODS:
                if pending_header is not None:
                    header_number, header = pending_header
                    if line == separator or line.startswith('{'):
                        raise TruncatedModBlockError(header, line_number=header_number)
                    try:
                        builder.mods.append(self.mod_parser.parse_mod(header, line))
                    except ItemParseError as e:
                        raise e.at_line(header_number)
                    pending_header = None
                elif line.startswith('{'):
                    pending_header = (line_number, line)
                elif line == separator:
                    continue
                else:
                    logger.debug("Skipping line %d outside a mod: %r", line_number, line)

        if section in MISSING_SECTION:
            raise EmptyOrMissingSectionError(MISSING_SECTION[section].value)
        if pending_header is not None:
            raise TruncatedModBlockError(pending_header[1], line_number=pending_header[0])

        rarity = Rarity.from_text(builder.rarity_text)
        item_name, base_name = resolve_item_name(rarity, builder.name_lines, builder.mods)

        return Item(
            base_name=base_name,
            item_name=item_name,
            stats=tuple(builder.stats),
            ilvl=builder.ilvl,
            sockets=builder.sockets,
            mods=tuple(builder.mods),
            item_class=builder.item_class,
            rarity_text=builder.rarity_text,
        )

    def _enter(self, section: ParseSection) -> ParseSection:
        logger.debug("Entering section %s", section.value)
        return section

    def _peek(self, lines: List[str], index: int) -> Optional[str]:
        """Next non-blank line after `index`, or None at end of text."""
        for line in lines[index + 1:]:
            if line:
                return line
        return None

    def _parse_key_value(self, line: str, key: str, section: ParseSection,
                         line_number: int) -> str:
        """Match 'Key: Value' with the expected key and return the value."""
        match = KEY_VALUE_PATTERN.match(line)
        if match is None:
            raise StructuralMismatchError(section.value, f"Expected '{key}: ...'",
                                          line=line, line_number=line_number)
        if match.group('left').strip() != key:
            raise StructuralMismatchError(section.value, f"Expected key '{key}'",
                                          line=line, line_number=line_number)
        return match.group('right').strip()

    def _parse_stat_line(self, line: str, builder: _ItemBuilder, line_number: int):
        """
        Record one stats-section line.

        'Item Level' and 'Sockets' fill their own fields; other 'Key: Value'
        lines with a number become StatLines. Anything else is skipped.
        """
        match = KEY_VALUE_PATTERN.match(line)
        if match is None:
            logger.debug("Skipping stat line %d: %r", line_number, line)
            return

        key = match.group('left').strip()
        value_text = match.group('right').strip()

        if key == ITEM_LEVEL_KEY:
            builder.ilvl = self._parse_item_level(value_text, line, line_number)
            return
        if key == SOCKETS_KEY:
            builder.sockets = value_text
            return

        number = STAT_NUMBER_PATTERN.search(value_text)
        if number is None:
            logger.debug("Stat line %d has no value: %r", line_number, line)
            return
        try:
            value = Decimal(number.group(0))
        except InvalidOperation:
            raise MalformedNumberError(ParseSection.ITEM_STATS.value, number.group(0),
                                       line=line, line_number=line_number)
        builder.stats.append(StatLine(name=key, value=value))

    def _parse_item_level(self, value_text: str, line: str, line_number: int) -> int:
        try:
            ilvl = int(value_text)
        except ValueError:
            ilvl = -1
        if not 0 <= ilvl <= MAX_ITEM_LEVEL:
            raise MalformedNumberError(ParseSection.ITEM_STATS.value, value_text,
                                       line=line, line_number=line_number)
        return ilvl


# =============================================================================
# NAME RESOLUTION
# =============================================================================

def resolve_item_name(rarity: Rarity, name_lines: List[str],
                      mods: List[ItemMod]) -> Tuple[ItemName, str]:
    """
    Turn the raw name block into an ItemName and a base type.

    Rare/Unique items print the name then the base type; Normal items print
    only the base type; Magic items print one line with the affix names
    around the base type.

    Returns:
        (item_name, base_name)
    """
    if rarity == Rarity.NORMAL:
        return ItemName.normal(), name_lines[-1]

    if rarity in (Rarity.RARE, Rarity.UNIQUE):
        name, base_name = name_lines[0], name_lines[-1]
        if rarity == Rarity.RARE:
            return ItemName.rare(name), base_name
        return ItemName.unique(name), base_name

    if rarity == Rarity.MAGIC:
        return _split_magic_name(' '.join(name_lines), mods)

    return ItemName.other('\n'.join(name_lines)), name_lines[-1]


def _split_magic_name(full_name: str, mods: List[ItemMod]) -> Tuple[ItemName, str]:
    """
    Split 'Hale Leather Belt of the Whelpling' into prefix, base, suffix.

    Affix names from the decoded mods are used when present. Without a named
    suffix mod, a trailing ' of ...' clause is taken as the suffix.
    """
    prefix_names = [m.name for m in mods if m.affix_type == AffixType.PREFIX and m.name]
    suffix_names = [m.name for m in mods if m.affix_type == AffixType.SUFFIX and m.name]

    prefix = ''
    suffix = ''
    remaining = full_name

    for name in prefix_names:
        if remaining.startswith(name + ' '):
            prefix = name
            remaining = remaining[len(name) + 1:]
            break

    for name in suffix_names:
        if remaining.endswith(' ' + name):
            suffix = name
            remaining = remaining[:-(len(name) + 1)]
            break

    if not suffix_names:
        match = MAGIC_SUFFIX_PATTERN.match(remaining)
        if match:
            suffix = match.group('suffix')
            remaining = match.group('base')

    return ItemName.magic(prefix, suffix), remaining


# =============================================================================
# Singleton instance
# =============================================================================
_item_parser: Optional[ItemParser] = None


def get_item_parser() -> ItemParser:
    """Get the shared item parser (default options)."""
    global _item_parser
    if _item_parser is None:
        _item_parser = ItemParser()
    return _item_parser


def parse_item(text: str, options: Optional[ParserOptions] = None) -> Item:
    """Convenience function to parse one item's clipboard text."""
    if options is not None:
        return ItemParser(options).parse_item(text)
    return get_item_parser().parse_item(text)
