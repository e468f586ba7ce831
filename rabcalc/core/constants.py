"""
rabcalc Reference Data and Engine Constants

Static reference values used to build the default lookup tables.
These are read once into an EngineTables object; components never
read this module directly at calculation time.
"""

from typing import Dict, Tuple

# ==================== Labor ====================

# Daily wages (currency units per worker-day)
DEFAULT_TUKANG_RATE = 150000.0
DEFAULT_PEKERJA_RATE = 135000.0

# Stage productivity used by the footing workflow
FORMWORK_PRODUCTIVITY_M2_DAY = 10.0
REBAR_PRODUCTIVITY_KG_DAY = 200.0

# ==================== Concrete ====================

DEFAULT_CONCRETE_GRADE = "K-225"

# grade -> (fc' MPa, cement sak/m3, sand m3/m3, gravel m3/m3, water/cement)
CONCRETE_GRADES: Dict[str, Tuple[float, float, float, float, float]] = {
    "K-175": (14.5, 6.5, 0.45, 0.65, 0.65),
    "K-200": (16.6, 7.0, 0.47, 0.67, 0.60),
    "K-225": (18.7, 7.5, 0.48, 0.68, 0.58),
    "K-250": (20.8, 8.0, 0.50, 0.70, 0.55),
    "K-300": (25.0, 8.5, 0.52, 0.72, 0.50),
    "K-350": (29.2, 9.0, 0.54, 0.74, 0.45),
}

# Mortar cement:sand ratios carried in the static table
MORTAR_RATIOS: Tuple[str, ...] = ("1:2", "1:3", "1:4", "1:5", "1:6", "1:7", "1:8")

# ==================== Reinforcement ====================

# Deformed bar nominal weight (kg/m)
REBAR_WEIGHTS_KG_M: Dict[str, float] = {
    "D8": 0.395,
    "D10": 0.617,
    "D12": 0.888,
    "D16": 1.578,
    "D19": 2.226,
    "D22": 2.984,
    "D25": 3.853,
}

STOCK_BAR_LENGTH_M = 12.0

# Structural design envelope (meters)
COVER_MIN_M = 0.025
COVER_MAX_M = 0.075
SPACING_MIN_M = 0.100
SPACING_MAX_M = 0.300

# Beam design envelope (meters)
BEAM_COVER_MIN_M = 0.015
BEAM_COVER_MAX_M = 0.050
STIRRUP_SPACING_MIN_M = 0.050
STIRRUP_SPACING_MAX_M = 0.300

# Longitudinal bars assumed in a beam (2 top, 2 bottom)
BEAM_MAIN_BAR_COUNT = 4

# ==================== Brick ====================

# Typical brick dimensions (mm); outside these only a warning is raised
BRICK_LENGTH_RANGE_MM = (100.0, 600.0)
BRICK_WIDTH_RANGE_MM = (50.0, 300.0)
BRICK_HEIGHT_RANGE_MM = (30.0, 250.0)

DEFAULT_MORTAR_THICKNESS_MM = 10.0

# ==================== Mortar ====================

DEFAULT_MORTAR_RATIO = "1:4"

# Loose volume of one 40 kg sak of cement
CEMENT_SAK_VOLUME_M3 = 0.024

# Dry instant (thin-bed) mortar per m3 of joint
INSTANT_MORTAR_KG_PER_M3 = 1600.0

WALL_PRODUCTIVITY_M2_DAY = 8.0

# Catalog name of the brick each preset prices against
BRICK_CATALOG_NAMES: Dict[str, str] = {
    "bata_merah": "Bata Merah",
    "bata_putih": "Bata Putih",
    "batako": "Batako",
    "bata_ringan": "Bata Ringan",
}

# ==================== Plaster ====================

# Skim-coat layers: (name, description, m2 covered, ((material, quantity, unit), ...))
PLASTER_LAYERS: Tuple[Tuple[str, str, float, Tuple[Tuple[str, float, str], ...]], ...] = (
    ("Lapis 1", "Lapis dasar plamiran", 30.0, (
        ("Adamix", 1.0, "sak"),
        ("Giant", 2.0, "sak"),
        ("Lem Rajawali", 5.0 / 60.0, "box"),
    )),
    ("Lapis 2", "Lapis tengah plamiran", 30.0, (
        ("Adamix", 1.0, "sak"),
        ("Giant", 3.0, "sak"),
        ("Lem Rajawali", 4.0 / 60.0, "box"),
    )),
    ("Lapis 3", "Lapis finishing plamiran", 25.0, (
        ("Giant", 2.0, "sak"),
        ("Lem Rajawali", 5.0 / 60.0, "box"),
    )),
)

# key -> (name, length mm, width mm, height mm, mortar mm, description)
BRICK_PRESETS: Dict[str, Tuple[str, float, float, float, float, str]] = {
    "bata_merah": ("Bata Merah Standar", 230.0, 110.0, 50.0, 10.0,
                   "Bata merah standar Indonesia"),
    "bata_putih": ("Batu Bata Kapur Putih", 370.0, 220.0, 90.0, 10.0,
                   "Batu bata kapur putih 37x22x9 cm"),
    "batako": ("Batako/Bata Beton", 390.0, 190.0, 190.0, 15.0,
               "Batako beton hollow"),
    "bata_ringan": ("Bata Ringan AAC", 600.0, 200.0, 100.0, 3.0,
                    "Bata ringan Autoclaved Aerated Concrete"),
}

# ==================== Market packaging ====================

# (market unit, base unit, factor, material, description)
CONVERSION_PRESETS: Tuple[Tuple[str, str, float, str, str], ...] = (
    ("sak", "kg", 40.0, "semen", "1 sak semen = 40 kg"),
    ("sak", "kg", 25.0, "mortar instan", "1 sak mortar instan = 25 kg"),
    ("truk", "m3", 7.0, "pasir", "1 truk pasir = 7 m3"),
    ("truk", "m3", 7.0, "", "1 truk = 7 m3"),
    ("bendel", "kg", 5.0, "kawat bendrat", "1 bendel kawat = 5 kg"),
    ("bendel", "lembar", 10.0, "kayu bekisting", "1 bendel kayu = 10 lembar"),
    ("dus", "m2", 1.44, "granit 60x60", "1 dus = 4 keping 60x60 cm = 1.44 m2"),
)

# ==================== Default price list ====================

# (name, unit, price per unit, category)
DEFAULT_MATERIAL_PRICES: Tuple[Tuple[str, str, float, str], ...] = (
    ("Semen", "sak", 65000.0, "beton"),
    ("Pasir", "m3", 350000.0, "beton"),
    ("Kerikil", "m3", 400000.0, "beton"),
    ("Besi Beton D8", "batang", 75000.0, "besi"),
    ("Besi Beton D10", "batang", 85000.0, "besi"),
    ("Besi Beton D12", "batang", 95000.0, "besi"),
    ("Besi Beton D16", "batang", 125000.0, "besi"),
    ("Besi Beton D19", "batang", 155000.0, "besi"),
    ("Besi Beton D22", "batang", 185000.0, "besi"),
    ("Besi Beton D25", "batang", 225000.0, "besi"),
    ("Kawat Bendrat", "bendel", 125000.0, "besi"),
    ("Kayu Bekisting 3x5", "bendel", 850000.0, "bekisting"),
    ("Paku", "kg", 18000.0, "bekisting"),
    ("Bata Merah", "bh", 800.0, "pasangan"),
    ("Bata Putih", "bh", 1350.0, "pasangan"),
    ("Batako", "bh", 3500.0, "pasangan"),
    ("Bata Ringan", "bh", 2200.0, "pasangan"),
    ("Mortar Instan", "sak", 45000.0, "pasangan"),
    ("Adamix", "sak", 95000.0, "finishing"),
    ("Giant", "sak", 80000.0, "finishing"),
    ("Lem Rajawali", "box", 1010000.0, "finishing"),
)

# Footing consumption rates
KAYU_LEMBAR_PER_M2 = 1.0
PAKU_KG_PER_M2 = 0.5
KAWAT_KG_PER_M3 = 1.0
