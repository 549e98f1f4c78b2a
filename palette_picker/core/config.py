"""Runtime settings, read from the environment.

Call load_env() first if .env files should be honoured; Settings only looks
at os.environ (or the mapping it is given).

  PALETTE_TOOL_MAX_COLORS   maximum palette length          (default 200)
  PALETTE_TOOL_SIZE         analysis footprint, WxH          (default 200x200)
  PALETTE_TOOL_QUANTIZER    quantization algorithm           (default median-cut)
  PALETTE_TOOL_FILTERS      comma-separated filter names     (default none)
  PALETTE_TOOL_LOG_LEVEL    loguru level for diagnostics     (default WARNING)
"""

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from palette_picker import registry
from palette_picker.core import filters as palette_filters

PREFIX = 'PALETTE_TOOL_'
LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')

_SIZE_RE = re.compile(r'^\s*(\d+)\s*[xX×]\s*(\d+)\s*$')


def parse_size(value: str) -> tuple[int, int]:
    """Parse 'WxH' into (w, h). Both must be positive."""
    m = _SIZE_RE.match(value)
    if not m:
        raise ValueError(f'Size must look like WxH, got {value!r}')
    w, h = int(m.group(1)), int(m.group(2))
    if w <= 0 or h <= 0:
        raise ValueError(f'Size must be positive, got {value!r}')
    return (w, h)


def parse_filters(value: str) -> tuple[str, ...]:
    names = tuple(n.strip() for n in value.split(',') if n.strip())
    palette_filters.resolve(names)
    return names


@dataclass(frozen=True)
class Settings:
    max_colors: int = 200
    size: tuple[int, int] = (200, 200)
    quantizer: str = 'median-cut'
    filters: tuple[str, ...] = field(default_factory=tuple)
    log_level: str = 'WARNING'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'Settings':
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        raw = env.get(f'{PREFIX}MAX_COLORS')
        if raw:
            try:
                kwargs['max_colors'] = int(raw)
            except ValueError:
                raise ValueError(f'{PREFIX}MAX_COLORS must be an integer, got {raw!r}') from None
            if kwargs['max_colors'] < 1:
                raise ValueError(f'{PREFIX}MAX_COLORS must be >= 1, got {raw!r}')

        raw = env.get(f'{PREFIX}SIZE')
        if raw:
            try:
                kwargs['size'] = parse_size(raw)
            except ValueError as e:
                raise ValueError(f'{PREFIX}SIZE: {e}') from None

        raw = env.get(f'{PREFIX}QUANTIZER')
        if raw:
            try:
                kwargs['quantizer'] = registry.get(raw.strip()).name
            except KeyError as e:
                raise ValueError(f'{PREFIX}QUANTIZER: {e.args[0]}') from None

        raw = env.get(f'{PREFIX}FILTERS')
        if raw:
            try:
                kwargs['filters'] = parse_filters(raw)
            except KeyError as e:
                raise ValueError(f'{PREFIX}FILTERS: {e.args[0]}') from None

        raw = env.get(f'{PREFIX}LOG_LEVEL')
        if raw:
            level = raw.strip().upper()
            if level not in LOG_LEVELS:
                raise ValueError(f'{PREFIX}LOG_LEVEL must be one of {", ".join(LOG_LEVELS)}, got {raw!r}')
            kwargs['log_level'] = level

        return cls(**kwargs)
