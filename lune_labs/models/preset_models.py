"""
Export Preset Catalog
=====================

Named export targets grouped by use case, plus the format and padding each
use case starts with.
"""

from enum import Enum
from typing import Dict, List, Tuple
from pydantic import BaseModel


class ExportFormat(str, Enum):
    """Output encoding of an export."""
    SVG = "svg"  # Vector
    PNG = "png"  # Raster


class ExportMode(str, Enum):
    """Use-case category selected in the export panel."""
    SOCIAL = "social"
    ICON = "icon"
    WEB = "web"
    PRINT = "print"
    CUSTOM = "custom"


class ExportPreset(BaseModel):
    """A named export size."""
    name: str
    width: int
    height: int
    description: str = ""

    model_config = {"frozen": True}


EXPORT_PRESETS: Dict[ExportMode, List[ExportPreset]] = {
    ExportMode.SOCIAL: [
        ExportPreset(name="Twitter 2x", width=800, height=800, description="Retina quality for Twitter profiles"),
        ExportPreset(name="Twitter 1x", width=400, height=400, description="Standard Twitter profile size"),
        ExportPreset(name="Instagram", width=640, height=640, description="2x for mobile displays"),
        ExportPreset(name="LinkedIn", width=800, height=800, description="Professional profile pictures"),
        ExportPreset(name="Facebook", width=340, height=340, description="2x for Facebook profiles"),
    ],
    ExportMode.ICON: [
        ExportPreset(name="16x16", width=16, height=16, description="Small app icons"),
        ExportPreset(name="32x32", width=32, height=32, description="Medium app icons"),
        ExportPreset(name="64x64", width=64, height=64, description="Large app icons"),
        ExportPreset(name="128x128", width=128, height=128, description="High-res app icons"),
    ],
    ExportMode.WEB: [
        ExportPreset(name="Small", width=200, height=200, description="Web thumbnails"),
        ExportPreset(name="Medium", width=400, height=400, description="Standard web logos"),
        ExportPreset(name="Large", width=800, height=800, description="High-res web display"),
    ],
    ExportMode.PRINT: [
        ExportPreset(name="1 inch @300dpi", width=300, height=300, description="Small print logos"),
        ExportPreset(name="2 inch @300dpi", width=600, height=600, description="Medium print logos"),
        ExportPreset(name="4 inch @300dpi", width=1200, height=1200, description="Large print logos"),
    ],
}

# Recommended (format, padding percent) per category
MODE_DEFAULTS: Dict[ExportMode, Tuple[ExportFormat, float]] = {
    ExportMode.SOCIAL: (ExportFormat.PNG, 15),  # Profile pictures get cropped to circles
    ExportMode.ICON: (ExportFormat.PNG, 8),
    ExportMode.WEB: (ExportFormat.SVG, 10),     # Scales with the page
    ExportMode.PRINT: (ExportFormat.PNG, 5),    # Maximise printable area
}


def get_presets(mode: ExportMode) -> List[ExportPreset]:
    """Presets for a category; custom has none."""
    return EXPORT_PRESETS.get(ExportMode(mode), [])


def get_preset(mode: ExportMode, index: int) -> ExportPreset:
    """Look up a single preset, raising KeyError when it does not exist."""
    presets = get_presets(mode)
    if not 0 <= index < len(presets):
        raise KeyError(f"No preset {index} for mode {ExportMode(mode).value}")
    return presets[index]
