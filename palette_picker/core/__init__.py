"""palette_picker.core — Foundation layer.

Contains the colour types, hex helpers, filters, errors, settings and report
rendering. This module has NO dependencies on palette_picker.quantizers,
palette_picker.registry or the session layer.
Only stdlib, numpy, and PIL are allowed here.
"""
