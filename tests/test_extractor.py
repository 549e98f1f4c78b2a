"""Tests for palette_picker.extractor — decode, rank, truncate, failure modes."""

import asyncio

import numpy as np
import pytest
from conftest import encode_png
from palette_picker.core.errors import DecodeError, EmptyInputError, PaletteError
from palette_picker.core.filters import avoid_red_black_white
from palette_picker.core.types import Color, SourceImage
from palette_picker.extractor import decode, extract, extract_async


class TestSolidImage:
    def test_single_colour(self, solid_png):
        palette = extract(solid_png((10, 200, 30)))
        assert len(palette) == 1
        assert palette.colors[0] == Color(10, 200, 30)
        assert palette.hex_codes() == ['#0AC81E']

    def test_population_is_whole_footprint(self, solid_png):
        palette = extract(solid_png((1, 2, 3), size=(1000, 500)))
        assert palette[0].population == 200 * 200

    def test_custom_target_size(self, solid_png):
        palette = extract(solid_png((1, 2, 3)), target_size=(10, 20))
        assert palette[0].population == 200

    def test_semi_transparent_keeps_alpha_out_of_hex(self, solid_png):
        palette = extract(solid_png((10, 20, 30, 128)))
        assert palette.colors[0] == Color(10, 20, 30, 128)
        assert palette.hex_codes() == ['#0A141E']

    def test_fully_transparent_is_empty_not_error(self, solid_png):
        palette = extract(solid_png((10, 20, 30, 0)))
        assert len(palette) == 0
        assert palette.dominant is None


class TestCheckerboard:
    def test_black_and_white(self, checkerboard_png):
        palette = extract(checkerboard_png, target_size=(200, 200), max_colors=200)
        assert sorted(palette.hex_codes()) == ['#000000', '#FFFFFF']

    def test_equal_populations_ordered_by_value(self, checkerboard_png):
        palette = extract(checkerboard_png)
        assert palette.hex_codes() == ['#000000', '#FFFFFF']
        assert palette[0].population == palette[1].population == 20000

    def test_stable_across_calls(self, checkerboard_png):
        assert extract(checkerboard_png) == extract(checkerboard_png)


class TestRanking:
    def test_fewer_colours_than_max_no_padding(self, quadrants_png):
        palette = extract(quadrants_png, max_colors=200)
        assert len(palette) == 4

    def test_tie_break_is_packed_rgb(self, quadrants_png):
        palette = extract(quadrants_png)
        assert palette.hex_codes() == ['#0000FF', '#00FF00', '#FF0000', '#FFFF00']

    def test_most_populous_first(self):
        arr = np.zeros((200, 200, 3), dtype=np.uint8)
        arr[:, :150] = (200, 0, 0)
        arr[:, 150:] = (0, 0, 200)
        palette = extract(encode_png(arr))
        assert palette.hex_codes() == ['#C80000', '#0000C8']
        assert palette.dominant.population == 150 * 200

    def test_truncates_to_max_colors(self, quadrants_png):
        palette = extract(quadrants_png, max_colors=2)
        assert len(palette) == 2


@pytest.mark.parametrize('quantizer', ['median-cut', 'kmeans', 'histogram'])
class TestBounds:
    def test_never_exceeds_max_colors(self, noise_png, quantizer):
        for max_colors in (1, 5, 16):
            palette = extract(noise_png, max_colors=max_colors, quantizer=quantizer)
            assert 1 <= len(palette) <= max_colors

    def test_idempotent(self, noise_png, quantizer):
        a = extract(noise_png, max_colors=12, quantizer=quantizer)
        b = extract(noise_png, max_colors=12, quantizer=quantizer)
        assert a.hex_codes() == b.hex_codes()

    def test_solid_colour_exact(self, solid_png, quantizer):
        palette = extract(solid_png((77, 88, 99)), quantizer=quantizer)
        assert palette.hex_codes() == ['#4D5863']

    def test_quantizer_name_recorded(self, solid_png, quantizer):
        assert extract(solid_png((0, 0, 0)), quantizer=quantizer).quantizer == quantizer


class TestFailures:
    def test_none_is_empty_input(self):
        with pytest.raises(EmptyInputError):
            extract(None)

    def test_zero_bytes(self):
        with pytest.raises(DecodeError):
            extract(b'')

    def test_not_an_image(self):
        with pytest.raises(DecodeError):
            extract(b'definitely not an image')

    def test_truncated_png(self, noise_png):
        with pytest.raises(DecodeError):
            extract(noise_png[: len(noise_png) // 2])

    def test_errors_share_base_class(self):
        with pytest.raises(PaletteError):
            extract(b'\x89PNG\r\n\x1a\n garbage')

    def test_bad_max_colors(self, solid_png):
        with pytest.raises(ValueError):
            extract(solid_png((0, 0, 0)), max_colors=0)

    def test_bad_target_size(self, solid_png):
        with pytest.raises(ValueError):
            extract(solid_png((0, 0, 0)), target_size=(0, 10))

    def test_float_max_colors_rejected(self, solid_png):
        with pytest.raises(ValueError):
            extract(solid_png((0, 0, 0)), max_colors=2.5)

    def test_unknown_quantizer(self, solid_png):
        with pytest.raises(KeyError):
            extract(solid_png((0, 0, 0)), quantizer='octree')


class TestInputs:
    def test_accepts_source_image(self, solid_png):
        source = SourceImage(data=solid_png((5, 6, 7)), name='x.png')
        assert extract(source).hex_codes() == ['#050607']

    def test_accepts_numpy_integers(self, quadrants_png):
        palette = extract(quadrants_png, target_size=np.array([50, 50]), max_colors=np.int64(2))
        assert len(palette) == 2
        assert sum(s.population for s in palette) == 50 * 50

    def test_decode_drops_transparent_pixels(self):
        arr = np.zeros((10, 10, 4), dtype=np.uint8)
        arr[:5] = (255, 0, 0, 255)
        pixels = decode(encode_png(arr), (10, 10))
        assert pixels.shape == (50, 4)

    def test_filters_drop_black_and_white(self):
        arr = np.zeros((200, 200, 3), dtype=np.uint8)
        arr[:, :100] = (255, 255, 255)
        arr[:, 150:] = (30, 60, 200)
        palette = extract(encode_png(arr), filters=[avoid_red_black_white])
        assert palette.hex_codes() == ['#1E3CC8']


class TestAsync:
    def test_matches_sync(self, quadrants_png):
        palette = asyncio.run(extract_async(quadrants_png))
        assert palette == extract(quadrants_png)

    def test_propagates_decode_error(self):
        with pytest.raises(DecodeError):
            asyncio.run(extract_async(b'nope'))
