"""
Data models for the Item Text Parser

Defines the structured form of an item copied from the game client:
identity (name, rarity, base type), property lines and the modifier list.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, List, Tuple


class AffixType(Enum):
    """Modifier kinds that appear in a mod header line."""
    PREFIX = 'Prefix'
    SUFFIX = 'Suffix'
    IMPLICIT = 'Implicit'
    UNIQUE = 'Unique'

    @classmethod
    def from_text(cls, text: str) -> Optional['AffixType']:
        """Look up an affix type by its header word, None if unknown."""
        for affix_type in cls:
            if affix_type.value == text:
                return affix_type
        return None


class Rarity(Enum):
    """Item rarity as printed on the 'Rarity:' line."""
    NORMAL = 'Normal'
    MAGIC = 'Magic'
    RARE = 'Rare'
    UNIQUE = 'Unique'
    OTHER = 'Other'  # Gems, currency, divination cards, ...

    @classmethod
    def from_text(cls, text: str) -> 'Rarity':
        for rarity in cls:
            if rarity.value == text:
                return rarity
        return cls.OTHER


class ItemCategory(Enum):
    """Coarse equipment category, used for recipe tallies."""
    WEAPON = 'weapon'
    RING = 'ring'
    AMULET = 'amulet'
    BELT = 'belt'
    GLOVES = 'gloves'
    BOOTS = 'boots'
    HELMET = 'helmet'
    BODY = 'body'
    UNKNOWN = 'unknown'


# 'Item Class:' values -> category
ITEM_CLASS_CATEGORIES = {
    'Rings': ItemCategory.RING,
    'Amulets': ItemCategory.AMULET,
    'Belts': ItemCategory.BELT,
    'Gloves': ItemCategory.GLOVES,
    'Boots': ItemCategory.BOOTS,
    'Helmets': ItemCategory.HELMET,
    'Body Armours': ItemCategory.BODY,

    # Weapons
    'Claws': ItemCategory.WEAPON,
    'Daggers': ItemCategory.WEAPON,
    'Rune Daggers': ItemCategory.WEAPON,
    'Wands': ItemCategory.WEAPON,
    'One Hand Swords': ItemCategory.WEAPON,
    'Thrusting One Hand Swords': ItemCategory.WEAPON,
    'One Hand Axes': ItemCategory.WEAPON,
    'One Hand Maces': ItemCategory.WEAPON,
    'Sceptres': ItemCategory.WEAPON,
    'Bows': ItemCategory.WEAPON,
    'Staves': ItemCategory.WEAPON,
    'Warstaves': ItemCategory.WEAPON,
    'Two Hand Swords': ItemCategory.WEAPON,
    'Two Hand Axes': ItemCategory.WEAPON,
    'Two Hand Maces': ItemCategory.WEAPON,
}


@dataclass(frozen=True)
class AffixNameTier:
    """Quoted affix name and tier of a rare-item prefix/suffix."""
    name: str
    tier: int


@dataclass(frozen=True)
class ItemMod:
    """
    One modifier, decoded from a header line and its effect line.

    `value` is the first number of the effect line; `roll_range` is the
    (low, high) pair printed right after it, if any. Neither is checked
    against the other.
    """
    affix_type: AffixType
    affix_name_tier: Optional[AffixNameTier] = None
    value: Optional[Decimal] = None
    roll_range: Optional[Tuple[Decimal, Decimal]] = None
    tags: Tuple[str, ...] = ()
    mod_qualifiers: str = ''

    @property
    def name(self) -> Optional[str]:
        return self.affix_name_tier.name if self.affix_name_tier else None

    @property
    def tier(self) -> Optional[int]:
        return self.affix_name_tier.tier if self.affix_name_tier else None


@dataclass(frozen=True)
class StatLine:
    """A 'Name: value' property line, e.g. 'Armour: 45'."""
    name: str
    value: Decimal


@dataclass(frozen=True)
class ItemName:
    """
    Resolved item name.

    Exactly one variant is held, selected by `rarity`:
        OTHER   -> name is the display text
        NORMAL  -> no payload
        MAGIC   -> prefix and/or suffix (empty string means absent)
        RARE    -> name
        UNIQUE  -> name

    Use the constructors below rather than the raw initializer.
    """
    rarity: Rarity
    name: str = ''
    prefix: str = ''
    suffix: str = ''

    @classmethod
    def other(cls, text: str) -> 'ItemName':
        return cls(Rarity.OTHER, name=text)

    @classmethod
    def normal(cls) -> 'ItemName':
        return cls(Rarity.NORMAL)

    @classmethod
    def magic(cls, prefix: str = '', suffix: str = '') -> 'ItemName':
        return cls(Rarity.MAGIC, prefix=prefix, suffix=suffix)

    @classmethod
    def rare(cls, name: str) -> 'ItemName':
        return cls(Rarity.RARE, name=name)

    @classmethod
    def unique(cls, name: str) -> 'ItemName':
        return cls(Rarity.UNIQUE, name=name)

    def __str__(self) -> str:
        if self.rarity == Rarity.OTHER:
            return f'?: {self.name}'
        if self.rarity == Rarity.NORMAL:
            return 'N'
        if self.rarity == Rarity.MAGIC:
            if not self.prefix:
                return f'M(s): {self.suffix}'
            if not self.suffix:
                return f'M(p): {self.prefix}'
            return f'M(p+s): {self.prefix} : {self.suffix}'
        if self.rarity == Rarity.RARE:
            return f'R: {self.name}'
        return f'U: {self.name}'


@dataclass(frozen=True)
class Item:
    """
    A fully decoded item.

    Built once by the item parser and never modified afterwards.
    """
    base_name: str
    item_name: ItemName
    stats: Tuple[StatLine, ...] = ()
    ilvl: int = 0
    sockets: str = ''
    mods: Tuple[ItemMod, ...] = ()

    # Header values
    item_class: str = ''
    rarity_text: str = ''

    @property
    def rarity(self) -> Rarity:
        return self.item_name.rarity

    @property
    def category(self) -> ItemCategory:
        return ITEM_CLASS_CATEGORIES.get(self.item_class, ItemCategory.UNKNOWN)

    @property
    def display_name(self) -> str:
        """Name as shown in game, e.g. 'Hale Leather Belt of the Whelpling'."""
        name = self.item_name
        if name.rarity in (Rarity.RARE, Rarity.UNIQUE):
            return f'{name.name} {self.base_name}'
        if name.rarity == Rarity.MAGIC:
            parts = [name.prefix, self.base_name, name.suffix]
            return ' '.join(part for part in parts if part)
        if name.rarity == Rarity.OTHER:
            return name.name
        return self.base_name

    @property
    def prefixes(self) -> List[ItemMod]:
        return [m for m in self.mods if m.affix_type == AffixType.PREFIX]

    @property
    def suffixes(self) -> List[ItemMod]:
        return [m for m in self.mods if m.affix_type == AffixType.SUFFIX]

    @property
    def implicits(self) -> List[ItemMod]:
        return [m for m in self.mods if m.affix_type == AffixType.IMPLICIT]

    def has_mod(self, text: str) -> bool:
        """Check if any mod's affix name or tags contain `text` (case-insensitive)."""
        needle = text.lower()
        for mod in self.mods:
            if mod.name and needle in mod.name.lower():
                return True
            if any(needle in tag.lower() for tag in mod.tags):
                return True
        return False

    def stat(self, name: str) -> Optional[Decimal]:
        """Value of the first stat line called `name`, or None."""
        for line in self.stats:
            if line.name == name:
                return line.value
        return None
