"""
Tests for the layer compositor
"""

import random

import numpy as np
import pytest
from PIL import Image, ImageFont

from nifty.errors import AssetError
from nifty.layers import build_renderers, get_renderer_class
from nifty.layers.caches import AssetCache, open_font
from nifty.models import OptionKind, parse_config
from nifty.services.compositor import Compositor
from nifty.services.sampler import WeightedSampler

from conftest import base_document, make_png


def single_token(document, token_id=1):
    """Build the only possible token of a document whose attributes each have one option."""
    config = parse_config(document)
    return config, WeightedSampler().sample_token(token_id, config.attributes, random.Random(0))


def attributes(*pairs):
    return [{"name": name, "options": {"Only": option}} for name, option in pairs]


@pytest.fixture
def half_blue(source):
    """4x4 image: left half opaque blue, right half transparent."""
    image = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    for x in range(2):
        for y in range(4):
            image.putpixel((x, y), (0, 0, 255, 255))
    path = source / "a.png"
    image.save(path)
    return path


class TestRendererRegistry:
    """Tests for the renderer registry."""

    def test_every_kind_has_renderer(self):
        renderers = build_renderers()
        assert set(renderers) == set(OptionKind)

    def test_blank_kinds_share_renderer(self):
        assert get_renderer_class(OptionKind.AUDIO) is get_renderer_class(OptionKind.NONE)
        assert get_renderer_class(OptionKind.TEXT) is not get_renderer_class(OptionKind.NONE)


class TestLayerOrder:
    """Tests for z-order: first attribute on top, last at the bottom."""

    def test_top_image_over_bottom_color(self, source, half_blue):
        document = base_document(attributes=attributes(
            ("Top", "a.png"),
            ("Bottom", {"type": "color", "color": "#FF0000"}),
        ))
        del document["width"], document["height"]
        config, token = single_token(document)

        image = Compositor(source).composite(token)
        pixels = np.array(image)

        assert image.size == (4, 4)
        assert (pixels[:, :2] == [0, 0, 255, 255]).all()
        assert (pixels[:, 2:] == [255, 0, 0, 255]).all()

    def test_reversed_declaration_hides_image(self, source, half_blue):
        document = base_document(attributes=attributes(
            ("Top", {"type": "color", "color": "#FF0000"}),
            ("Bottom", "a.png"),
        ))
        del document["width"], document["height"]
        config, token = single_token(document)

        pixels = np.array(Compositor(source).composite(token))
        assert (pixels == [255, 0, 0, 255]).all()


class TestLayers:
    """Tests for the individual layer kinds."""

    def test_color_alpha_blends(self, source):
        config, token = single_token(base_document(attributes=attributes(
            ("Tint", {"type": "color", "color": "#0000FF80"}),
            ("Base", {"type": "color", "color": "#FF0000"}),
        )))
        r, g, b, a = Compositor(source, config.canvas_size).composite(token).getpixel((0, 0))
        assert a == 255
        assert r == pytest.approx(127, abs=2)
        assert b == pytest.approx(128, abs=2)

    def test_none_and_audio_add_no_pixels(self, source):
        config, token = single_token(base_document(attributes=attributes(
            ("Nothing", None),
            ("Music", "song.mp3"),
        )))
        pixels = np.array(Compositor(source, config.canvas_size).composite(token))
        assert (pixels[..., 3] == 0).all()

    def test_image_stretched_to_canvas(self, source):
        make_png(source / "small.png", (2, 2), (10, 20, 30, 255))
        config, token = single_token(base_document(attributes=attributes(("Pic", "small.png"))))
        image = Compositor(source, config.canvas_size).composite(token)
        assert image.size == (8, 8)
        assert image.getpixel((7, 7)) == (10, 20, 30, 255)

    def test_canvas_from_bottom_most_image(self, source):
        make_png(source / "top.png", (3, 3))
        make_png(source / "bottom.png", (6, 5))
        document = base_document(attributes=attributes(("Top", "top.png"), ("Bottom", "bottom.png")))
        del document["width"], document["height"]
        config, token = single_token(document)
        assert Compositor(source).composite(token).size == (6, 5)

    def test_no_canvas_size(self, source):
        document = base_document(attributes=attributes(("Base", {"type": "color", "color": "#FF0000"})))
        del document["width"], document["height"]
        config, token = single_token(document)
        with pytest.raises(AssetError) as exc:
            Compositor(source).composite(token)
        assert "canvas size unknown" in str(exc.value)

    def test_images_cached(self, source, half_blue):
        config, token = single_token(base_document(attributes=attributes(("Pic", "a.png"))))
        compositor = Compositor(source, config.canvas_size)
        compositor.composite(token)
        compositor.composite(token)
        assert len(compositor.images) == 1


class TestAssetErrors:
    """Tests for asset failures."""

    def test_missing_font(self, source):
        with pytest.raises(AssetError) as exc:
            open_font(source / "fonts" / "gone.ttf", 12)
        assert "font not found" in str(exc.value)
        assert exc.value.path.endswith("gone.ttf")

    def test_corrupt_font(self, source):
        (source / "broken.ttf").write_bytes(b"this is not a font file")
        with pytest.raises(AssetError) as exc:
            open_font(source / "broken.ttf", 12)
        assert "unable to load font" in str(exc.value)

    def test_missing_font_during_composite(self, source):
        config, token = single_token(base_document(attributes=attributes(
            ("Label", {"type": "text", "font": "gone.otf", "text": "x", "height": 10}),
        )))
        with pytest.raises(AssetError) as exc:
            Compositor(source, config.canvas_size).composite(token)
        assert exc.value.path.endswith("gone.otf")

    def test_missing_image(self, source):
        config, token = single_token(base_document(attributes=attributes(("Pic", "gone.png"))))
        with pytest.raises(AssetError) as exc:
            Compositor(source, config.canvas_size).composite(token)
        assert exc.value.path.endswith("gone.png")

    def test_corrupt_image(self, source):
        (source / "bad.png").write_bytes(b"definitely not a png")
        config, token = single_token(base_document(attributes=attributes(("Pic", "bad.png"))))
        with pytest.raises(AssetError) as exc:
            Compositor(source, config.canvas_size).composite(token)
        assert exc.value.path.endswith("bad.png")

    def test_unsupported_font_extension(self, source):
        (source / "font.woff9").write_bytes(b"")
        config, token = single_token(base_document(attributes=attributes(
            ("Label", {"type": "text", "font": "font.woff9", "text": "x", "height": 10}),
        )))
        with pytest.raises(AssetError) as exc:
            Compositor(source, config.canvas_size).composite(token)
        assert "unsupported font format" in str(exc.value)


class TestTextLayer:
    """Tests for text rendering, using Pillow's bundled font."""

    @pytest.fixture
    def compositor_factory(self, source):
        def factory(config):
            compositor = Compositor(source, config.canvas_size)
            compositor.fonts = AssetCache(lambda path, height: ImageFont.load_default(size=height))
            return compositor
        return factory

    def _text_document(self, **text):
        option = {"type": "text", "font": "font.ttf", "text": "#77", "height": 24, "color": "#FFFFFF"}
        option.update(text)
        return base_document(width=200, height=60, attributes=attributes(("Label", option)))

    def _ink_columns(self, image):
        alpha = np.array(image)[..., 3]
        return np.nonzero(alpha.max(axis=0))[0]

    def test_left_aligned(self, compositor_factory):
        config, token = single_token(self._text_document(x=10, y=5))
        columns = self._ink_columns(compositor_factory(config).composite(token))
        assert len(columns) > 0
        assert 10 <= columns.min() <= 20
        assert columns.max() < 100

    def test_negative_x_right_aligns(self, compositor_factory):
        config, token = single_token(self._text_document(x=-10, y=5))
        columns = self._ink_columns(compositor_factory(config).composite(token))
        assert len(columns) > 0
        assert 170 <= columns.max() <= 190
        assert columns.min() > 100

    def test_id_substituted(self, compositor_factory):
        config = parse_config(self._text_document(text="#{id}", x=10, y=5))
        sampler = WeightedSampler()
        compositor = compositor_factory(config)
        first = compositor.composite(sampler.sample_token(1, config.attributes, random.Random(0)))
        again = compositor.composite(sampler.sample_token(1, config.attributes, random.Random(0)))
        other = compositor.composite(sampler.sample_token(84, config.attributes, random.Random(0)))
        assert np.array_equal(np.array(first), np.array(again))
        assert not np.array_equal(np.array(first), np.array(other))

    def test_text_color(self, compositor_factory):
        config, token = single_token(self._text_document(x=10, y=5, color="#00FF00"))
        pixels = np.array(compositor_factory(config).composite(token))
        opaque = pixels[pixels[..., 3] == 255]
        assert len(opaque) > 0
        assert (opaque[:, :3] == [0, 255, 0]).all()
