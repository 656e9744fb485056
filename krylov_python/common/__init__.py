"""
Common utilities shared by the solvers.

**Logging and Monitoring:**
- Console/file logger with indentation levels and optional colors
- Process-wide logger used by the eigensolvers when none is injected

Example:
    >>> from krylov_python.common import get_global_logger
    >>> log = get_global_logger()
    >>> log.info("starting", lvl=1)
"""

import  importlib
from    typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .flog          import Logger, get_global_logger

# Lazy loading registry
_LAZY_IMPORTS = {
    'Logger'                    : ('.flog', 'Logger'),
    'get_global_logger'         : ('.flog', 'get_global_logger'),
}

_LOADED = {}

def __getattr__(name: str):
    """Lazy import handler - loads modules only when accessed."""
    if name in _LAZY_IMPORTS:
        if name not in _LOADED:
            module_path, attr_name  = _LAZY_IMPORTS[name]
            module                  = importlib.import_module(module_path, package=__name__)
            _LOADED[name]           = getattr(module, attr_name)
        return _LOADED[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
    """List available attributes for autocompletion."""
    return list(_LAZY_IMPORTS.keys()) + ['get_module_description', 'list_available_modules']

####################################################################################################

def get_module_description(module_name):
    """
    Get the description of a specific module in the common package.
    """
    descriptions = {
        "flog"          : "Provides logging functionalities for structured output."
    }
    return descriptions.get(module_name, "Module not found.")

def list_available_modules():
    """
    List all available modules in the common package.
    """
    return ["flog"]

__all__ = list(_LAZY_IMPORTS.keys()) + ['get_module_description', 'list_available_modules']

####################################################################################################
#! EOF
####################################################################################################
