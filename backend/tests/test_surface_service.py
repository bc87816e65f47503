import io

import pytest
from PIL import Image

from snapdoc.core.errors import InvalidStateError
from snapdoc.models.image import DecodedImage
from snapdoc.services.surface_service import SurfaceService


def _decoded(size, color) -> DecodedImage:
    image = Image.new("RGBA", size, color=color)
    return DecodedImage(width=size[0], height=size[1], image=image)


def test_new_surface_is_empty():
    surface = SurfaceService()
    assert surface.is_empty
    assert surface.size == (0, 0)


def test_draw_resizes_and_replaces_contents():
    surface = SurfaceService()
    surface.draw(_decoded((120, 80), (255, 0, 0, 255)))
    surface.draw(_decoded((30, 300), (0, 0, 255, 255)))

    assert surface.size == (30, 300)

    snapshot = surface.snapshot()
    assert (snapshot.width, snapshot.height) == (30, 300)
    with Image.open(io.BytesIO(snapshot.data)) as img:
        assert img.format == "PNG"
        assert img.size == (30, 300)
        # Sin composición: no queda rastro de la imagen roja anterior
        assert img.convert("RGBA").getpixel((0, 0)) == (0, 0, 255, 255)


def test_draw_does_not_alias_decoded_image():
    surface = SurfaceService()
    decoded = _decoded((10, 10), (0, 255, 0, 255))
    surface.draw(decoded)
    decoded.image.paste((0, 0, 0, 255), (0, 0, 10, 10))

    with Image.open(io.BytesIO(surface.snapshot().data)) as img:
        assert img.convert("RGBA").getpixel((5, 5)) == (0, 255, 0, 255)


def test_snapshot_of_empty_surface_fails():
    with pytest.raises(InvalidStateError):
        SurfaceService().snapshot()


def test_clear_collapses_surface():
    surface = SurfaceService()
    surface.draw(_decoded((50, 50), (10, 20, 30, 255)))
    surface.clear()

    assert surface.is_empty
    assert surface.size == (0, 0)
    with pytest.raises(InvalidStateError):
        surface.snapshot()

    # Borrar dos veces no falla
    surface.clear()
