"""Quantizer auto-discovery and registration.

Scans palette_picker/quantizers/ for modules that define a `quantizer` object
of type Quantizer. Collects them into a dict keyed by name.
"""

import importlib
import pkgutil

from palette_picker.core.types import Quantizer

DEFAULT = 'median-cut'

_registry: dict[str, Quantizer] = {}
_modules: dict[str, str] = {}


def discover() -> dict[str, Quantizer]:
    """Import all quantizer modules and return the registry."""
    if _registry:
        return _registry

    import palette_picker.quantizers as pkg

    for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__):
        if modname.startswith('_'):
            continue
        module = importlib.import_module(f'palette_picker.quantizers.{modname}')
        quant = getattr(module, 'quantizer', None)
        if isinstance(quant, Quantizer):
            _registry[quant.name] = quant
            _modules[quant.name] = module.__name__

    return _registry


def get(name: str) -> Quantizer:
    """Get a quantizer by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown quantizer: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def module_name(name: str) -> str:
    """Dotted module path for a registered quantizer (for docstring access)."""
    get(name)
    return _modules[name]


def all_quantizers() -> dict[str, Quantizer]:
    """Return all registered quantizers."""
    return discover()
