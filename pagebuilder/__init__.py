"""
pagebuilder - Page-builder editing core

Section data model and store, draft/commit editing with debounced live
preview, section validation, and error isolation with recovery actions.
"""

__version__ = "1.0.0"

from pagebuilder.core import (
    SectionType,
    MoveDirection,
    PreviewDevice,
    Section,
    SectionView,
    SectionStore,
    default_settings,
    typed_settings,
)
from pagebuilder.events import EventDispatcher, StoreEvent, StoreEventType
from pagebuilder.validators import ValidationError, validate_section
from pagebuilder.errors import (
    ErrorKind,
    PageBuilderError,
    RecoveryAction,
    RecoveryActionType,
    ErrorBoundary,
    BoundaryState,
    create_page_builder_error,
    generate_recovery_actions,
)
from pagebuilder.editing import (
    EditSession,
    SessionClosedError,
    Scheduler,
    ThreadingScheduler,
    AsyncioScheduler,
    ManualScheduler,
)
from pagebuilder.rendering import PageRenderer, RendererRegistry
from pagebuilder.persistence import PageRepository, InMemoryPageRepository, JsonFilePageRepository
from pagebuilder.config import PageBuilderConfig, load_config, get_config
from pagebuilder.builder import PageBuilder

__all__ = [
    "__version__",
    # Core
    "SectionType",
    "MoveDirection",
    "PreviewDevice",
    "Section",
    "SectionView",
    "SectionStore",
    "default_settings",
    "typed_settings",
    # Events
    "EventDispatcher",
    "StoreEvent",
    "StoreEventType",
    # Validation
    "ValidationError",
    "validate_section",
    # Errors
    "ErrorKind",
    "PageBuilderError",
    "RecoveryAction",
    "RecoveryActionType",
    "ErrorBoundary",
    "BoundaryState",
    "create_page_builder_error",
    "generate_recovery_actions",
    # Editing
    "EditSession",
    "SessionClosedError",
    "Scheduler",
    "ThreadingScheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    # Rendering
    "PageRenderer",
    "RendererRegistry",
    # Persistence
    "PageRepository",
    "InMemoryPageRepository",
    "JsonFilePageRepository",
    # Config
    "PageBuilderConfig",
    "load_config",
    "get_config",
    # Controller
    "PageBuilder",
]
