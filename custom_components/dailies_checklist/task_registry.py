"""Static catalog of default checklist tasks.

The catalog is the single source for task identity and display metadata.
Persisted state only stores the mutable per-task fields (see TaskData);
names, locations and descriptions are looked up here by key.
"""

from __future__ import annotations

from . import const
from .type_defs import CatalogEntry


def _entry(
    key: str,
    name: str,
    location: str,
    description: str,
    category: str,
    detection: str,
    sort_order: int,
    *,
    max_count: int = const.DEFAULT_TASK_MAX_COUNT,
    enabled: bool = True,
) -> CatalogEntry:
    return {
        "key": key,
        "name": name,
        "location": location,
        "description": description,
        "category": category,
        "detection": detection,
        "enabled": enabled,
        "max_count": max_count,
        "sort_order": sort_order,
    }


_DAILY = const.CATEGORY_DAILY
_GC = const.CATEGORY_GRAND_COMPANY
_WEEKLY = const.CATEGORY_WEEKLY
_AUTO = const.DETECTION_AUTO
_HYBRID = const.DETECTION_HYBRID
_DUTY_FINDER = "Duty Finder"

DEFAULT_CATALOG: tuple[CatalogEntry, ...] = (
    # --- Daily ---
    _entry("mini_cactpot", "Mini Cactpot", "Gold Saucer",
           "3 scratch tickets daily (10 MGP each)", _DAILY, _AUTO, 10, max_count=3),
    _entry("roulette_expert", "Expert Roulette", _DUTY_FINDER,
           "Current max-level dungeons for tomestones", _DAILY, _AUTO, 20),
    _entry("roulette_leveling", "Leveling Roulette", _DUTY_FINDER,
           "Large EXP bonus for leveling jobs", _DAILY, _AUTO, 30),
    _entry("roulette_msq", "Main Scenario Roulette", _DUTY_FINDER,
           "Castrum/Praetorium/Porta for large tomestone rewards", _DAILY, _AUTO, 40),
    _entry("roulette_alliance", "Alliance Raid Roulette", _DUTY_FINDER,
           "24-man raids for high EXP and tomestones", _DAILY, _AUTO, 50),
    _entry("roulette_normal_raid", "Normal Raid Roulette", _DUTY_FINDER,
           "8-man normal raids for tomestones", _DAILY, _AUTO, 60),
    _entry("roulette_trials", "Trials Roulette", _DUTY_FINDER,
           "Trial fights for tomestones and EXP", _DAILY, _AUTO, 70),
    _entry("roulette_5060708090", "Level 50/60/70/80/90 Dungeons", _DUTY_FINDER,
           "High-level dungeons for Poetics and Aesthetics", _DAILY, _AUTO, 80),
    _entry("roulette_frontline", "Frontline Roulette", _DUTY_FINDER,
           "PvP roulette for EXP, Wolf Marks, tomestones", _DAILY, _AUTO, 90),
    _entry("roulette_guildhests", "Guildhests Roulette", _DUTY_FINDER,
           "Small group tutorials for minor EXP", _DAILY, _AUTO, 100),
    _entry("roulette_mentor", "Mentor Roulette", _DUTY_FINDER,
           "Mentor-only roulette (requires Battle Mentor)", _DAILY, _AUTO, 110,
           enabled=False),
    _entry("beast_tribe_quests", "Beast Tribe Quests", "Various Tribal Areas",
           "12 daily allowances across all tribes", _DAILY, _AUTO, 120, max_count=12),
    _entry("daily_hunts_arr", "Daily Hunts (ARR)", "Grand Company HQ",
           "Hunt bills for Allied Seals", _DAILY, _HYBRID, 130),
    _entry("daily_hunts_hw", "Daily Hunts (HW)", "Foundation",
           "Hunt bills for Centurio Seals", _DAILY, _HYBRID, 140),
    _entry("daily_hunts_sb", "Daily Hunts (SB)", "Kugane / Rhalgr's Reach",
           "Hunt bills for Centurio Seals", _DAILY, _HYBRID, 150),
    _entry("daily_hunts_shb", "Daily Hunts (ShB)", "Crystarium / Eulmore",
           "Hunt bills for Sacks of Nuts", _DAILY, _HYBRID, 160),
    _entry("daily_hunts_ew", "Daily Hunts (EW)", "Old Sharlayan / Radz-at-Han",
           "Hunt bills for Sacks of Nuts", _DAILY, _HYBRID, 170),
    _entry("daily_hunts_dt", "Daily Hunts (DT)", "Tuliyollal / Solution Nine",
           "Hunt bills for current hunt currency", _DAILY, _HYBRID, 180),
    _entry("treasure_map", "Treasure Map Gathering", "Gathering Nodes (Lv40+)",
           "One map can be gathered per 18 hours", _DAILY, _HYBRID, 190),
    # --- Grand Company (20:00 UTC) ---
    _entry("gc_supply_provisioning", "GC Supply/Provisioning", "Grand Company HQ",
           "Turn in crafted/gathered items (resets 20:00 UTC)", _GC, _AUTO, 200),
    # --- Weekly ---
    _entry("jumbo_cactpot", "Jumbo Cactpot", "Gold Saucer",
           "3 lottery tickets (drawing Saturday 08:00 UTC)", _WEEKLY, _AUTO, 300,
           max_count=3),
    _entry("wondrous_tails", "Wondrous Tails", "Idyllshire (Khloe Aliapoh)",
           "Complete journal duties for stickers and rewards", _WEEKLY, _AUTO, 310),
    _entry("custom_deliveries", "Custom Deliveries", "Various NPCs",
           "12 deliveries total (max 6 per NPC) for scrips", _WEEKLY, _AUTO, 320,
           max_count=12),
    _entry("fashion_report", "Fashion Report", "Gold Saucer (Masked Rose)",
           "Glamour judging for 60,000+ MGP (judging starts Friday)", _WEEKLY, _AUTO,
           330),
    _entry("weekly_hunts", "Weekly Elite Marks", "Hunt Boards",
           "B-rank elite hunt bills for bonus seals", _WEEKLY, _HYBRID, 340),
    _entry("doman_enclave", "Doman Enclave Donations", "Doman Enclave",
           "Donate items for bonus Gil (up to 40,000/week)", _WEEKLY, _HYBRID, 350),
    _entry("challenge_log", "Challenge Log", "Logs Menu",
           "Various weekly objectives for bonus EXP/Gil/MGP", _WEEKLY, _HYBRID, 360),
    _entry("faux_hollows", "Faux Hollows", "Idyllshire (Faux Commander)",
           "Complete Unreal Trial for Faux Leaves currency", _WEEKLY, _HYBRID, 370),
    _entry("masked_carnivale", "Masked Carnivale Weekly", "Ul'dah (Steps of Thal)",
           "Blue Mage weekly targets for Allied Seals", _WEEKLY, _AUTO, 380,
           enabled=False),
)  # fmt: skip

_CATALOG_BY_KEY: dict[str, CatalogEntry] = {
    entry["key"]: entry for entry in DEFAULT_CATALOG
}


def get_catalog_entry(task_key: str) -> CatalogEntry | None:
    """Return the catalog definition for task_key, or None if unknown."""
    return _CATALOG_BY_KEY.get(task_key)


def get_catalog_entries(category: str | None = None) -> list[CatalogEntry]:
    """Return catalog entries in display order, optionally for one category."""
    entries = sorted(DEFAULT_CATALOG, key=lambda entry: entry["sort_order"])
    if category is None:
        return entries
    return [entry for entry in entries if entry["category"] == category]


def get_display_name(task_key: str) -> str:
    """Return the catalog display name, falling back to the raw key."""
    entry = _CATALOG_BY_KEY.get(task_key)
    return entry["name"] if entry else task_key
