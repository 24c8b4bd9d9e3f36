"""Game and solver constants - no mutable state."""

# Faction tag -> in-game label
FACTION_LABELS: dict[str, str] = {
    "PROTAGONIST":           "주역",
    "LEGION_OF_GLORY":       "빛",
    "EMPIRE_HONOR":          "제국",
    "ORIGINS_OF_LIGHT":      "기원",
    "PRINCESS_ALLIANCE":     "공주",
    "METEOR_STRIKE":         "메테오",
    "YELESS_LEGENDS":        "전설",
    "STRATEGIC_MASTERS":     "전략",
    "DARK_REINCARNATION":    "어둠",
    "TIME_AND_SPACE":        "시공",
    "RE_INCARNATION_TENSEI": "리인카",
    "TRANSCENDENCE":         "초월",
}

# Hero class tag -> in-game label
CLASS_LABELS: dict[str, str] = {
    "INFANTRY": "보병",
    "CAVALRY":  "기병",
    "LANCER":   "창병",
    "ARCHER":   "궁병",
    "FLYER":    "비병",
    "AQUATIC":  "수병",
    "ASSASSIN": "암살자",
    "MAGE":     "마법사",
    "HOLY":     "승려",
    "DEMON":    "마물",
    "DRAGON":   "용족",
}

FACTIONS:     tuple[str, ...] = tuple(FACTION_LABELS)
HERO_CLASSES: tuple[str, ...] = tuple(CLASS_LABELS)

# Shared factions beyond this count earn nothing extra
EDGE_SCORE_CAP = 3

# Local search halts after this many rounds even if still improving
ROUND_CAP = 30

# Separator of the string form of a SlotKey; escaped inside components
SLOT_KEY_SEPARATOR = "/"
