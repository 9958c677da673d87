"""Rendering and delivery settings for :mod:`pdf_pagekit`."""

from __future__ import annotations

import dataclasses
from pathlib import Path

PDF_POINTS_PER_INCH = 72.0


def scale_for_dpi(dpi: float) -> float:
    """Return the render scale that produces *dpi* from PDF point space."""

    if dpi <= 0:
        raise ValueError(f"DPI must be positive, got {dpi}")
    return dpi / PDF_POINTS_PER_INCH


@dataclasses.dataclass(frozen=True, slots=True)
class RenderSettings:
    """Scale presets and encoder quality used by every rendering caller.

    The export scale is always derived from ``export_dpi``; there is no
    separately maintained export scale constant.
    """

    thumbnail_scale: float = 0.3
    preview_scale: float = 1.5
    export_dpi: int = 300
    thumbnail_quality: int = 80
    preview_quality: int = 80

    def __post_init__(self) -> None:
        if self.thumbnail_scale <= 0 or self.preview_scale <= 0:
            raise ValueError("Render scales must be positive")
        if self.export_dpi <= 0:
            raise ValueError(f"Export DPI must be positive, got {self.export_dpi}")
        for quality in (self.thumbnail_quality, self.preview_quality):
            if not 1 <= quality <= 100:
                raise ValueError(f"JPEG quality must be within 1-100, got {quality}")

    @property
    def export_scale(self) -> float:
        return scale_for_dpi(self.export_dpi)


@dataclasses.dataclass(frozen=True, slots=True)
class DeliverySettings:
    """Where automatic (non-interactive) downloads land."""

    download_dir: Path = dataclasses.field(default_factory=Path.cwd)


DEFAULT_SETTINGS = RenderSettings()


__all__ = [
    "PDF_POINTS_PER_INCH",
    "RenderSettings",
    "DeliverySettings",
    "DEFAULT_SETTINGS",
    "scale_for_dpi",
]
