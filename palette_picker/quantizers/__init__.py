"""Quantization algorithms.

Every .py file in this package that defines a `quantizer` object is
auto-registered by palette_picker.registry.discover().
"""
