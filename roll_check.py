"""
Roll Check

Decides whether a freshly rolled item meets a roll target: does it carry
a prefix, a suffix, and one of the wanted mods. The rolling itself
(currency clicks, clipboard reads) is driven by the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from item_parser import ParserOptions, parse_item
from mod_parser import MOD_HEADER_PATTERN
from models import AffixType, Item, ItemMod, Rarity

logger = logging.getLogger(__name__)


@dataclass
class RollTarget:
    """A wanted mod, matched by name or effect text (case-insensitive)."""
    name: str
    is_prefix: bool


@dataclass
class RollConfig:
    """What to roll for on a given base item."""
    item_name: str
    mods: List[RollTarget] = field(default_factory=list)
    auto_aug_regal: bool = False

    def needs_prefix(self) -> bool:
        return any(target.is_prefix for target in self.mods)

    def needs_suffix(self) -> bool:
        return any(not target.is_prefix for target in self.mods)


@dataclass
class RollResult:
    has_prefix: bool = False
    has_suffix: bool = False
    has_mod: bool = False


def _mod_matches(mod: ItemMod, needle: str) -> bool:
    if mod.name and needle in mod.name.lower():
        return True
    return any(needle in tag.lower() for tag in mod.tags)


def effect_lines_by_affix(item_text: str) -> Dict[AffixType, List[str]]:
    """
    Collect the lower-cased effect line of each mod, keyed by affix type.

    Only the line right after a mod header counts; name, stat and flavour
    lines are never searched.
    """
    lines = [line.strip() for line in item_text.splitlines() if line.strip()]
    effects: Dict[AffixType, List[str]] = {}
    for header, effect in zip(lines, lines[1:]):
        match = MOD_HEADER_PATTERN.match(header)
        if match is None or MOD_HEADER_PATTERN.match(effect):
            continue
        affix_type = AffixType.from_text(match.group('affix_type'))
        if affix_type is not None:
            effects.setdefault(affix_type, []).append(effect.lower())
    return effects


def check_roll(item: Item, config: RollConfig, item_text: str = '') -> RollResult:
    """
    Check a parsed item against a roll config.

    Args:
        item: Parsed item
        config: Roll target
        item_text: Raw clipboard text; when given, the effect lines of mods
            on the target's side are searched too, so wording like
            'to Strength' matches

    Returns:
        RollResult
    """
    prefixes = item.prefixes
    suffixes = item.suffixes

    has_prefix = bool(prefixes)
    has_suffix = bool(suffixes)

    # Mod-less copies still show affixes in a magic item's name
    if item.rarity == Rarity.MAGIC:
        has_prefix = has_prefix or bool(item.item_name.prefix)
        has_suffix = has_suffix or bool(item.item_name.suffix)

    effects = effect_lines_by_affix(item_text) if item_text else {}
    has_mod = False
    for target in config.mods:
        needle = target.name.lower()
        if target.is_prefix:
            side, side_effects = prefixes, effects.get(AffixType.PREFIX, [])
        else:
            side, side_effects = suffixes, effects.get(AffixType.SUFFIX, [])
        if any(_mod_matches(mod, needle) for mod in side) or any(needle in e for e in side_effects):
            has_mod = True
            break

    result = RollResult(has_prefix=has_prefix, has_suffix=has_suffix, has_mod=has_mod)
    logger.debug("Roll check for %r: %r", config.item_name, result)
    return result


def check_roll_text(text: str, config: RollConfig,
                    options: Optional[ParserOptions] = None) -> RollResult:
    """Parse clipboard text and check it against a roll config."""
    item = parse_item(text, options)
    if config.item_name and config.item_name not in item.display_name:
        logger.warning("Item %r is not a %r", item.display_name, config.item_name)
    return check_roll(item, config, item_text=text)
