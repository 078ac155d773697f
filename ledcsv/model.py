from pydantic import BaseModel, Field
from typing import List, Optional, Tuple

from .grid import GRID_HEIGHT, GRID_WIDTH


class LedFootprint(BaseModel):
    index: int
    cells: List[Tuple[int, int]] = Field(default_factory=list)  # (x, y) in the logical grid


class LedLayout(BaseModel):
    version: int = 1
    name: str = "custom"
    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    led_count: int
    leds: List[LedFootprint] = []


class ConverterConfig(BaseModel):
    layout_path: Optional[str] = None  # None -> packaged HERA layout
    scaled_path: Optional[str] = None
    preview_path: Optional[str] = None
    preview_scale: int = Field(default=10, ge=1)
    log_level: str = "INFO"
