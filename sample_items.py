"""
Sample clipboard texts used by the tests.

Copied with the advanced copy shortcut, so mods carry their headers.
"""

RARE_BELT = """
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
{ Suffix Modifier "of the Thunderhead" (Tier: 5) — Elemental, Lightning, Resistance }
+29(24-29)% to Lightning Resistance (fractured)
{ Prefix Modifier "Hale" (Tier: 8) — Life }
+15(10-19) to maximum Life
"""

RARE_ARMOUR = """
Item Class: Body Armours
Rarity: Rare
Havoc Shell
Plate Vest
--------
Quality: +20% (augmented)
Armour: 45 (augmented)
--------
Requirements:
Level: 12
Str: 35
--------
Sockets: R-R B
--------
Item Level: 68
--------
{ Suffix Modifier "of the Lion" (Tier: 4) — Attribute }
+31(28-32) to Strength
"""

MAGIC_BELT = """
Item Class: Belts
Rarity: Magic
Hale Leather Belt of the Brute
--------
Item Level: 30
--------
{ Implicit Modifier — Life }
+30(25-40) to maximum Life (implicit)
--------
{ Prefix Modifier "Hale" (Tier: 8) — Life }
+15(10-19) to maximum Life
{ Suffix Modifier "of the Brute" (Tier: 9) — Attribute }
+8(8-12) to Strength
"""

MAGIC_RING_NO_MODS = """
Item Class: Rings
Rarity: Magic
Sapphire Ring of the Penguin
--------
Item Level: 12
"""

NORMAL_BELT = """
Item Class: Belts
Rarity: Normal
Leather Belt
--------
Item Level: 5
--------
{ Implicit Modifier — Life }
+30(25-40) to maximum Life (implicit)
"""

UNIQUE_BOOTS = """
Item Class: Boots
Rarity: Unique
Seven-League Step
Rawhide Boots
--------
Evasion Rating: 45
--------
Requirements:
Level: 40
--------
Sockets: G-G
--------
Item Level: 80
--------
{ Unique Modifier — Speed }
50% increased Movement Speed
--------
Rise above the soil, and speed across the earth.
"""

SKILL_GEM = """
Item Class: Skill Gems
Rarity: Gem
Fireball
--------
Level: 1
Mana Cost: 6
"""
