"""Swatch rendering — text grid and JSON output for palette-tool results."""

import json
from typing import Any

from palette_picker.core.types import Palette, Swatch

COLUMNS = 3
PROMPT = 'No image selected. Pass an image path to extract its palette.'


def _block(swatch: Swatch) -> str:
    """Two-cell truecolour block; terminals without 24-bit colour show plain blocks."""
    c = swatch.color
    return f'\x1b[38;2;{c.r};{c.g};{c.b}m██\x1b[0m'


def _cell(index: int, swatch: Swatch, ansi: bool) -> str:
    block = _block(swatch) + ' ' if ansi else ''
    return f'{block}[{index}] {swatch.hex}'


def format_text(
    palette: Palette,
    image_name: str | None = None,
    error: str | None = None,
    ansi: bool = False,
    columns: int = COLUMNS,
) -> str:
    """Format a palette as a grid of swatches, `columns` per row."""
    lines = []
    if error:
        lines.append(f'Error: {error}')
        lines.append(PROMPT)
        return '\n'.join(lines)
    if image_name is None:
        return PROMPT

    header = f'palette-tool: {image_name}'
    if palette.quantizer:
        header += f' — {palette.quantizer}'
    lines.append(header)
    lines.append('')

    if not len(palette):
        lines.append('No colours found (image is fully transparent or everything was filtered).')
        return '\n'.join(lines)

    lines.append(f'Total Colors : {len(palette)}')
    lines.append('')

    cells = [_cell(i, s, ansi) for i, s in enumerate(palette)]
    width = max(len(_cell(i, s, False)) for i, s in enumerate(palette))
    for row_start in range(0, len(cells), columns):
        row = cells[row_start : row_start + columns]
        # Pad on the plain-text width; escape codes have no display width
        padded = [
            cell + ' ' * (width - len(_cell(row_start + j, palette[row_start + j], False)))
            for j, cell in enumerate(row)
        ]
        lines.append('  ' + '   '.join(padded).rstrip())
    return '\n'.join(lines)


def format_json(palette: Palette, image_name: str | None = None, error: str | None = None) -> str:
    """Format a palette as JSON: colour entries plus a count."""
    obj: dict[str, Any] = {}
    if image_name is not None:
        obj['image'] = image_name
    if palette.quantizer:
        obj['quantizer'] = palette.quantizer
    obj['count'] = len(palette)
    obj['colors'] = palette.entries()
    if error:
        obj['error'] = error
    return json.dumps(obj, indent=2)
