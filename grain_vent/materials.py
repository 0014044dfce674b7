"""
Material Catalog for Grain Vent

Maps each supported grain/oilseed to the sorption isotherm that best fits it
and the (A, B, C) coefficients for that isotherm.

The table is static configuration. Lookup is the only validation gate in the
engine: anything outside the catalog returns None instead of raising.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class Material(str, Enum):
    """Grain and oilseed kinds in the fixed catalog."""
    BARLEY = "barley"
    RAPESEED = "rapeseed"
    CORN = "corn"
    OATS = "oats"
    POPCORN = "popcorn"
    RICE = "rice"
    SORGHUM = "sorghum"
    SOYBEAN = "soybean"
    SUNFLOWER = "sunflower"
    WHEAT = "wheat"


class IsothermModel(Enum):
    """Sorption isotherm equations supported by the solvers."""
    HENDERSON = "henderson"
    HALSEY = "halsey"
    CHUNG = "chung"
    OSWIN = "oswin"


@dataclass(frozen=True)
class ModelParameters:
    """Isotherm variant plus its three coefficients."""
    model: IsothermModel
    a: float
    b: float
    c: float


MODEL_TABLE: Dict[Material, ModelParameters] = {
    Material.BARLEY: ModelParameters(IsothermModel.CHUNG, 475.12, 0.14843, 71.996),
    Material.RAPESEED: ModelParameters(IsothermModel.HALSEY, 3.489, -0.010553, 1.86),
    Material.CORN: ModelParameters(IsothermModel.HENDERSON, 0.000066612, 1.9677, 42.143),
    Material.OATS: ModelParameters(IsothermModel.HENDERSON, 0.000085511, 2.0087, 37.811),
    Material.POPCORN: ModelParameters(IsothermModel.HENDERSON, 0.00015593, 1.5978, 60.754),
    Material.RICE: ModelParameters(IsothermModel.HENDERSON, 0.000048524, 2.0794, 45.646),
    Material.SORGHUM: ModelParameters(IsothermModel.CHUNG, 797.33, 0.18159, 52.238),
    Material.SOYBEAN: ModelParameters(IsothermModel.CHUNG, 228.2, 0.2072, 30.0),
    Material.SUNFLOWER: ModelParameters(IsothermModel.HENDERSON, 0.00031, 1.7459, 66.603),
    Material.WHEAT: ModelParameters(IsothermModel.HENDERSON, 0.000043295, 2.1119, 41.565),
}


def parse_material(value: Union[Material, str, None]) -> Optional[Material]:
    """
    Resolve a Material member or its string value.

    Args:
        value: Material member, or a name such as "wheat" / " Wheat "

    Returns:
        The Material, or None if the value is not in the catalog
    """
    if isinstance(value, Material):
        return value
    if not isinstance(value, str):
        return None

    try:
        return Material(value.strip().lower())
    except ValueError:
        return None


def lookup_parameters(material: Union[Material, str, None]) -> Optional[ModelParameters]:
    """
    Get the isotherm model and coefficients for a material.

    Returns:
        ModelParameters, or None for anything outside the catalog
    """
    resolved = parse_material(material)
    if resolved is None:
        logger.debug(f"[lookup_parameters] Unknown material: {material!r}")
        return None

    return MODEL_TABLE[resolved]
