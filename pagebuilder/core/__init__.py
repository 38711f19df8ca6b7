"""
pagebuilder.core - Section data model and Section Store
"""

from .enums import (
    SectionType,
    MoveDirection,
    PreviewDevice,
    DeviceViewport,
    DEVICE_VIEWPORTS,
    settings_key_for,
    parse_section_type,
)
from .settings import (
    SettingsModel,
    SETTINGS_MODELS,
    DEFAULT_CONTENT,
    settings_model_for,
    default_settings,
    active_settings,
    typed_settings,
)
from .section import (
    Section,
    SectionView,
    generate_section_id,
    freeze,
    thaw,
)
from .paths import get_path, set_path, split_path
from .history import HistoryEntry, PageHistory, DEFAULT_HISTORY_LIMIT
from .store import SectionStore, IMMUTABLE_FIELDS

__all__ = [
    # Enums
    "SectionType",
    "MoveDirection",
    "PreviewDevice",
    "DeviceViewport",
    "DEVICE_VIEWPORTS",
    "settings_key_for",
    "parse_section_type",
    # Settings
    "SettingsModel",
    "SETTINGS_MODELS",
    "DEFAULT_CONTENT",
    "settings_model_for",
    "default_settings",
    "active_settings",
    "typed_settings",
    # Section
    "Section",
    "SectionView",
    "generate_section_id",
    "freeze",
    "thaw",
    # Paths
    "get_path",
    "set_path",
    "split_path",
    # History
    "HistoryEntry",
    "PageHistory",
    "DEFAULT_HISTORY_LIMIT",
    # Store
    "SectionStore",
    "IMMUTABLE_FIELDS",
]
