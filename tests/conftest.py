# shared pytest fixtures for the markerpoint tests
import numpy as np
import pytest

from markerpoint.components.image3D import Image3D
from markerpoint.components.marker_point_image import MarkerPointImage


@pytest.fixture
def background():
    """A (rows, cols, slices) == (6, 7, 8) background image at the global origin."""
    return Image3D(np.arange(6 * 7 * 8, dtype=np.int16).reshape(6, 7, 8))


@pytest.fixture
def offset_background():
    """Same size as `background`, placed at global origin (3, 4, 5)."""
    return Image3D(np.zeros((6, 7, 8), dtype=np.int16), origin=(3, 4, 5))


@pytest.fixture
def marker_image():
    return MarkerPointImage()


@pytest.fixture
def changes(marker_image):
    """Records one entry per marker_image_changed emission."""
    calls = []
    marker_image.marker_image_changed.connect(lambda: calls.append(1))
    return calls


@pytest.fixture
def markers(marker_image, background, changes):
    """A created, empty marker image bound to `background`, with the creation notification discarded."""
    marker_image.force_marker_image_creation(background)
    changes.clear()
    return marker_image
