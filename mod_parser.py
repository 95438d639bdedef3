"""
Mod Line Parser

Decodes one item modifier from the two lines the game prints for it
in an advanced item copy:

    { Prefix Modifier "Phantasm's" (Tier: 3) — Defences, Evasion }
    73(68-79)% increased Evasion Rating

Parsing Strategy:
- Step 1: Match the header line (affix type, optional name/tier, optional tags)
- Step 2: Match the effect line (first number and its optional roll range)
- Step 3: Collect qualifiers (header words before the affix type, trailing
  annotations like "(fractured)")

The two steps use separate patterns so a failure points at the exact line.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from models import AffixNameTier, AffixType, ItemMod
from parse_errors import (
    MalformedNumberError,
    StructuralMismatchError,
    UnknownAffixTypeError,
)

logger = logging.getLogger(__name__)

SECTION = 'ItemMods'


# =============================================================================
# MOD HEADER PATTERN
# =============================================================================
# Matches: { [Qualifiers] <AffixType> Modifier ["<Name>"] [(Tier: <N>)] [— <tags>] }
# Examples:
#   { Prefix Modifier "Phantasm's" (Tier: 3) — Defences, Evasion }
#   { Unique Modifier — Elemental, Fire, Resistance }
#   { Implicit Modifier }
#   { Master Crafted Suffix Modifier "of Craft" (Rank: 1) — Attack, Speed }
#
# Pattern breakdown:
#   \{\s                              # Opening brace
#   (?P<qualifiers>(?:[A-Z][\w-]*\s)*?)  # Leading words, e.g. "Fractured"
#   (?P<affix_type>\w+)\sModifier\s   # Affix type word, then literal "Modifier"
#   (?:"(?P<name>[^"]+)"\s)?          # Optional quoted affix name
#   (?:\((?:Tier|Rank):\s(?P<tier>[^)]*)\)\s)?   # Optional tier
#   (?:—\s(?P<tags>.*)\s)?            # Optional em-dash tag clause
#   \}                                # Closing brace
#
MOD_HEADER_PATTERN = re.compile(
    r'^\{ (?P<qualifiers>(?:[A-Z][\w-]* )*?)(?P<affix_type>\w+) Modifier '
    r'(?:"(?P<name>[^"]+)" )?'
    r'(?:\((?:Tier|Rank): (?P<tier>[^)]*)\) )?'
    r'(?:— (?P<tags>.*) )?\}$'
)

TAG_SEPARATOR = ', '


# =============================================================================
# MOD EFFECT PATTERN
# =============================================================================
# Matches: [non-digit text][VALUE][(LOW-HIGH)][rest]
# Examples:
#   73(68-79)% increased Evasion Rating     -> 73, (68, 79)
#   +29(24-29)% to Lightning Resistance     -> 29, (24, 29)
#   60% increased Mana Regeneration Rate    -> 60, None
#   Cannot be Frozen                        -> None, None
#
MOD_EFFECT_PATTERN = re.compile(
    r'(?P<before>[^\d]*)'
    r'(?P<value>\d+(?:\.\d+)?)?'
    r'(?:\((?P<low>\d+(?:\.\d+)?)-(?P<high>\d+(?:\.\d+)?)\))?'
    r'(?P<end>.*)'
)

# Lower-case annotation at the end of an effect line: "(fractured)", "(crafted)"
TRAILING_QUALIFIER_PATTERN = re.compile(r'\s*(\([a-z][a-z ]*\))$')


def _to_decimal(raw: str, line: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise MalformedNumberError(SECTION, raw, line=line)


def split_tags(tag_text: Optional[str]) -> Tuple[str, ...]:
    """Split a tag clause on ', ' exactly; no further trimming."""
    if tag_text is None:
        return ()
    return tuple(tag_text.split(TAG_SEPARATOR))


def trailing_qualifiers(effect: str) -> List[str]:
    """Collect trailing '(word)' annotations of an effect line, in print order."""
    found = []
    remaining = effect
    while True:
        match = TRAILING_QUALIFIER_PATTERN.search(remaining)
        if not match:
            break
        found.insert(0, match.group(1))
        remaining = remaining[:match.start()]
    return found


class ModLineParser:
    """
    Parser for header/effect line pairs.

    Holds no state between calls; `capture_qualifiers` controls whether
    mod_qualifiers is filled in or left empty.
    """

    def __init__(self, capture_qualifiers: bool = True):
        self.capture_qualifiers = capture_qualifiers

    def parse_mod(self, header: str, effect: str) -> ItemMod:
        """
        Decode one modifier.

        Args:
            header: Trimmed header line, '{ ... }'
            effect: Trimmed effect line that follows it

        Returns:
            ItemMod

        Raises:
            StructuralMismatchError: header doesn't match the header grammar
            UnknownAffixTypeError: affix type word isn't recognised
            MalformedNumberError: tier/value/range isn't a number
        """
        logger.debug("Parsing mod header %r", header)
        head = MOD_HEADER_PATTERN.match(header)
        if head is None:
            raise StructuralMismatchError(SECTION, 'Mod header does not match', line=header)

        affix_word = head.group('affix_type')
        affix_type = AffixType.from_text(affix_word)
        if affix_type is None:
            raise UnknownAffixTypeError(affix_word, line=header)

        affix_name_tier = self._parse_name_tier(head.group('name'), head.group('tier'), header)
        tags = split_tags(head.group('tags'))

        logger.debug("Parsing mod effect %r", effect)
        body = MOD_EFFECT_PATTERN.match(effect)
        if body is None:
            raise StructuralMismatchError(SECTION, 'Mod effect does not match', line=effect)

        value = None
        if body.group('value') is not None:
            value = _to_decimal(body.group('value'), effect)

        # Only a value directly followed by "(low-high)" has a roll range
        roll_range = None
        low, high = body.group('low'), body.group('high')
        if low is not None and high is not None:
            roll_range = (_to_decimal(low, effect), _to_decimal(high, effect))

        qualifiers = ''
        if self.capture_qualifiers:
            words = head.group('qualifiers').split()
            qualifiers = ' '.join(words + trailing_qualifiers(effect))

        item_mod = ItemMod(
            affix_type=affix_type,
            affix_name_tier=affix_name_tier,
            value=value,
            roll_range=roll_range,
            tags=tags,
            mod_qualifiers=qualifiers,
        )
        logger.debug("Created mod %r", item_mod)
        return item_mod

    def _parse_name_tier(self, name: Optional[str], tier: Optional[str],
                         header: str) -> Optional[AffixNameTier]:
        # A name without a tier (or the reverse) counts as neither
        if name is None or tier is None:
            return None
        # Tiers are plain positive ASCII integers: no sign, spaces or '_'
        if not (tier.isascii() and tier.isdigit()) or int(tier) < 1:
            raise MalformedNumberError(SECTION, tier, line=header)
        return AffixNameTier(name=name, tier=int(tier))


# =============================================================================
# Singleton instance
# =============================================================================
_mod_parser: Optional[ModLineParser] = None


def get_mod_parser() -> ModLineParser:
    """Get the shared mod line parser (default options)."""
    global _mod_parser
    if _mod_parser is None:
        _mod_parser = ModLineParser()
    return _mod_parser


def parse_mod(header: str, effect: str) -> ItemMod:
    """Convenience function to decode one header/effect pair."""
    return get_mod_parser().parse_mod(header.strip(), effect.strip())
