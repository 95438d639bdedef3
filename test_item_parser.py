#!/usr/bin/env python3
"""
Tests for the item text parser.

Run with pytest, or directly as a script for a PASS/FAIL listing.
"""

import sys
from decimal import Decimal

import pytest

from item_parser import ItemParser, ParserOptions, parse_item, resolve_item_name
from models import AffixType, ItemCategory, ItemName, Rarity, StatLine
from parse_errors import (
    EmptyOrMissingSectionError,
    ItemParseError,
    MalformedNumberError,
    StructuralMismatchError,
    TruncatedModBlockError,
    UnknownAffixTypeError,
)
from sample_items import (
    MAGIC_BELT,
    MAGIC_RING_NO_MODS,
    NORMAL_BELT,
    RARE_ARMOUR,
    RARE_BELT,
    SKILL_GEM,
    UNIQUE_BOOTS,
)


# (name, text, item_name, base_name, ilvl, mod count)
ITEM_CASES = [
    ('rare belt', RARE_BELT, ItemName.rare('Dusk Clasp'), 'Leather Belt', 75, 4),
    ('rare armour', RARE_ARMOUR, ItemName.rare('Havoc Shell'), 'Plate Vest', 68, 1),
    ('magic belt', MAGIC_BELT, ItemName.magic('Hale', 'of the Brute'), 'Leather Belt', 30, 3),
    ('magic ring', MAGIC_RING_NO_MODS, ItemName.magic('', 'of the Penguin'), 'Sapphire Ring', 12, 0),
    ('normal belt', NORMAL_BELT, ItemName.normal(), 'Leather Belt', 5, 1),
    ('unique boots', UNIQUE_BOOTS, ItemName.unique('Seven-League Step'), 'Rawhide Boots', 80, 1),
    ('skill gem', SKILL_GEM, ItemName.other('Fireball'), 'Fireball', 0, 0),
]


@pytest.mark.parametrize("label,text,item_name,base_name,ilvl,mod_count", ITEM_CASES)
def test_parse_item(label, text, item_name, base_name, ilvl, mod_count):
    item = parse_item(text)
    assert item.item_name == item_name
    assert item.base_name == base_name
    assert item.ilvl == ilvl
    assert len(item.mods) == mod_count


def test_mods_in_source_order():
    item = parse_item(RARE_BELT)
    assert [m.affix_type for m in item.mods] == [
        AffixType.IMPLICIT, AffixType.PREFIX, AffixType.SUFFIX, AffixType.PREFIX,
    ]
    assert [m.name for m in item.mods] == [None, "Phantasm's", 'of the Thunderhead', 'Hale']
    assert item.mods[1].value == Decimal('73')
    assert item.mods[1].roll_range == (Decimal('68'), Decimal('79'))


def test_header_fields():
    item = parse_item(RARE_BELT)
    assert item.item_class == 'Belts'
    assert item.rarity_text == 'Rare'
    assert item.rarity == Rarity.RARE
    assert item.category == ItemCategory.BELT
    assert item.display_name == 'Dusk Clasp Leather Belt'


def test_internal_separators_keep_stats_section():
    item = parse_item(RARE_ARMOUR)
    assert item.stats == (
        StatLine('Quality', Decimal('20')),
        StatLine('Armour', Decimal('45')),
        StatLine('Level', Decimal('12')),
        StatLine('Str', Decimal('35')),
    )
    assert item.sockets == 'R-R B'
    assert item.stat('Armour') == Decimal('45')
    assert item.stat('Energy Shield') is None


def test_item_level_not_duplicated_in_stats():
    item = parse_item(RARE_BELT)
    assert item.stats == (StatLine('Level', Decimal('44')),)
    assert item.sockets == ''


def test_flavour_text_after_mods_is_skipped():
    item = parse_item(UNIQUE_BOOTS)
    assert item.sockets == 'G-G'
    assert item.mods[0].affix_type == AffixType.UNIQUE
    assert item.mods[0].tags == ('Speed',)
    assert item.category == ItemCategory.BOOTS


def test_magic_name_display():
    item = parse_item(MAGIC_BELT)
    assert str(item.item_name) == 'M(p+s): Hale : of the Brute'
    assert item.display_name == 'Hale Leather Belt of the Brute'
    assert [m.name for m in item.prefixes] == ['Hale']
    assert [m.name for m in item.suffixes] == ['of the Brute']
    assert len(item.implicits) == 1


def test_other_rarity():
    item = parse_item(SKILL_GEM)
    assert item.rarity == Rarity.OTHER
    assert str(item.item_name) == '?: Fireball'
    assert item.stat('Mana Cost') == Decimal('6')


def test_magic_name_prefix_only():
    name, base = resolve_item_name(Rarity.MAGIC, ['Hale Leather Belt'], parse_item(MAGIC_BELT).mods)
    assert name == ItemName.magic('Hale', '')
    assert base == 'Leather Belt'
    assert str(name) == 'M(p): Hale'


def test_magic_suffix_splits_at_last_of():
    name, base = resolve_item_name(Rarity.MAGIC, ['Crown of Thorns of the Fox'], [])
    assert name == ItemName.magic('', 'of the Fox')
    assert base == 'Crown of Thorns'

    name, base = resolve_item_name(Rarity.MAGIC, ['Crown of Thorns'], [])
    assert name == ItemName.magic('', 'of Thorns')
    assert base == 'Crown'


def test_rare_single_line_name():
    name, base = resolve_item_name(Rarity.RARE, ['Leather Belt'], [])
    assert name == ItemName.rare('Leather Belt')
    assert base == 'Leather Belt'


def test_mods_section_needs_header_after_separator():
    text = RARE_BELT.replace('{ Implicit Modifier — Life }\n', '')
    item = parse_item(text)
    # The orphaned implicit line stays in the stats section and is skipped
    assert len(item.mods) == 3
    assert item.stats == (StatLine('Level', Decimal('44')),)


def test_custom_separator():
    text = RARE_ARMOUR.replace('--------', '~~~~')
    item = ItemParser(ParserOptions(separator='~~~~')).parse_item(text)
    assert item.base_name == 'Plate Vest'
    assert len(item.mods) == 1


# =============================================================================
# Failure cases
# =============================================================================

def test_wrong_first_line():
    with pytest.raises(StructuralMismatchError) as info:
        parse_item(RARE_BELT.replace('Item Class: Belts', 'Rarity: Rare', 1))
    assert info.value.section == 'ItemClass'
    assert info.value.line_number == 1


def test_first_line_without_colon():
    with pytest.raises(StructuralMismatchError) as info:
        parse_item(RARE_BELT.replace('Item Class: Belts', 'Item Class Belts'))
    assert info.value.section == 'ItemClass'


def test_wrong_rarity_key():
    with pytest.raises(StructuralMismatchError) as info:
        parse_item(RARE_BELT.replace('Rarity: Rare', 'Quality: Rare'))
    assert info.value.section == 'ItemRarity'
    assert info.value.line_number == 2


@pytest.mark.parametrize("text,section", [
    ('', 'ItemClass'),
    ('Item Class: Belts', 'ItemRarity'),
    ('Item Class: Belts\nRarity: Rare\nDusk Clasp\nLeather Belt', 'ItemStats'),
])
def test_missing_sections(text, section):
    with pytest.raises(EmptyOrMissingSectionError) as info:
        parse_item(text)
    assert info.value.section == section


def test_empty_name_block():
    with pytest.raises(StructuralMismatchError) as info:
        parse_item('Item Class: Belts\nRarity: Rare\n--------\nItem Level: 1')
    assert info.value.section == 'ItemName'


def test_truncated_mod_block():
    text = RARE_BELT.strip() + '\n{ Suffix Modifier "of the Lion" (Tier: 4) — Attribute }'
    with pytest.raises(TruncatedModBlockError) as info:
        parse_item(text)
    assert info.value.line_number == len(text.splitlines())


def test_header_followed_by_separator():
    text = NORMAL_BELT.replace('+30(25-40) to maximum Life (implicit)', '--------')
    with pytest.raises(TruncatedModBlockError):
        parse_item(text)


def test_unknown_affix_type_in_item():
    text = RARE_BELT.replace('{ Prefix Modifier "Hale" (Tier: 8) — Life }', '{ Corrupted Modifier }')
    with pytest.raises(UnknownAffixTypeError) as info:
        parse_item(text)
    header_line = text.strip().splitlines().index('{ Corrupted Modifier }') + 1
    assert info.value.line_number == header_line


def test_bad_item_level():
    with pytest.raises(MalformedNumberError) as info:
        parse_item(RARE_BELT.replace('Item Level: 75', 'Item Level: lots'))
    assert info.value.section == 'ItemStats'

    with pytest.raises(MalformedNumberError):
        parse_item(RARE_BELT.replace('Item Level: 75', 'Item Level: 300'))


def run_tests():
    """Run the table cases and print a PASS/FAIL line for each."""
    print("Testing item text parser...")
    print("=" * 60)

    passed = 0
    failed = 0
    for case in ITEM_CASES:
        label = case[0]
        try:
            test_parse_item(*case)
            print(f"PASS: {label}")
            passed += 1
        except (AssertionError, ItemParseError) as e:
            print(f"FAIL: {label} - {e}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = run_tests()
    sys.exit(0 if success else 1)
