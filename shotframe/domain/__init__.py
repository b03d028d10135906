"""Domain package exports for value objects and pure pipeline logic."""

from .entities import (
    CombinedResult,
    DisplayMode,
    DroppedItems,
    ExistingScreenshots,
    FramedResult,
    ImageQuality,
    LibraryPermission,
    PhotoSource,
    PickerItem,
    PickerSelection,
    Screenshot,
    SelectionFilter,
)
from .result_store import ResultStore
from .view_state import (
    CombinedPlaceholder,
    CombinedResults,
    IndividualPlaceholder,
    IndividualResults,
    ViewState,
    derive_state,
)

__all__ = [
    "CombinedPlaceholder",
    "CombinedResult",
    "CombinedResults",
    "DisplayMode",
    "DroppedItems",
    "ExistingScreenshots",
    "FramedResult",
    "ImageQuality",
    "IndividualPlaceholder",
    "IndividualResults",
    "LibraryPermission",
    "PhotoSource",
    "PickerItem",
    "PickerSelection",
    "ResultStore",
    "Screenshot",
    "SelectionFilter",
    "ViewState",
    "derive_state",
]
