from .app_context import AppContext, build_app_context
from .dialog_config import DialogConfig, load_dialog_config
from .dialog_controller import EqualizerDialog
from .focus_context import FocusContext, FocusHost
from .focus_manager import FocusManager
from .layouts import LayoutError, build_layout, build_widgets, validate_layout
from .sequencer import JumpTarget, Section, SectionKind, SectionSequencer
from .utils import log_exception

__all__ = [
    "AppContext",
    "build_app_context",
    "DialogConfig",
    "load_dialog_config",
    "EqualizerDialog",
    "FocusContext",
    "FocusHost",
    "FocusManager",
    "LayoutError",
    "build_layout",
    "build_widgets",
    "validate_layout",
    "JumpTarget",
    "Section",
    "SectionKind",
    "SectionSequencer",
    "log_exception",
]
