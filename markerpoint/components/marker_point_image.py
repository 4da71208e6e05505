""" marker_point_image.py
    Part of the markerpoint package.

    MarkerPointImage stores the image which represents marker points. It keeps the storage of the marker volume
    separate from the interactive creation and use of marker points in a viewer: a viewer writes markers through
    change_marker_point(), reads them back one slice at a time with get_markers_from_image(), and uses the
    get_index_of_*_marker() queries to jump between marked slices.

    The marker volume is a uint8 Image3D with the same geometry as the background image. 0 means "no marker" and
    any other value is the marker's colour index. All coordinates and slice numbers are 1-based.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple, Union

import numpy as np
from PyQt5.QtCore import QObject, pyqtSignal

from ..config import MARKER_DTYPE, NEAREST_MARKER_TIE_BIAS
from ..enumerations import ImageOrientation, ImageType
from .image3D import Image3D

logger = logging.getLogger(__name__)


class MarkerImageNotCreatedError(RuntimeError):
    """Raised when marker voxels are needed before the marker image has been created."""


@dataclass(frozen=True)
class Unmaterialized:
    """No marker image has been allocated yet."""


@dataclass(frozen=True)
class Materialized:
    image: Image3D


MarkerImageState = Union[Unmaterialized, Materialized]


class Marker(NamedTuple):
    """A marker found on a 2D slice. x is the column and y the row of the slice, both 1-based."""
    x: int
    y: int
    colour: int


class MarkerPointImage(QObject):
    """
    The marker volume for one background image.

    marker_image_changed is emitted synchronously, on the calling thread, after every change to the marker volume.
    Writing the value a voxel already holds is not a change.
    """

    marker_image_changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._state: MarkerImageState = Unmaterialized()

    # lifecycle --------------------------------------------------------------------------------------------------------
    def marker_image_exists(self):
        return isinstance(self._state, Materialized)

    def clear_markers(self):
        """Set every marker voxel to 0. The marker image stays allocated."""
        if isinstance(self._state, Materialized):
            self._state.image.reset()
        self._notify_marker_image_changed()

    def set_blank_marker_image(self, template: Image3D):
        """Replace the marker image with an empty one on the template's geometry."""
        image = template.blank_copy()
        image.change_raw_image(np.zeros(template.image_size, dtype=MARKER_DTYPE))
        image.image_type = ImageType.COLORMAP
        self._state = Materialized(image)
        logger.debug("Created blank marker image of size %s at origin %s", image.image_size, list(image.origin))
        self._notify_marker_image_changed()

    def force_marker_image_creation(self, template: Image3D):
        if not self.marker_image_exists():
            self.set_blank_marker_image(template)

    def background_image_changed(self, template: Image3D):
        """
        Rebind the marker image to a new background geometry.

        Nothing happens if no marker image exists yet or the geometry is unchanged. Otherwise the marker image is
        re-created on the template's geometry, and markers whose global coordinates fall inside both the old and the
        new extent are carried over. Markers outside the new extent are dropped.
        """
        if not self.marker_image_exists():
            return
        old_image = self._image()
        if (tuple(template.image_size) == tuple(old_image.image_size)
                and np.array_equal(template.origin, old_image.origin)):
            return

        new_image = template.blank_copy()
        new_image.change_raw_image(np.zeros(template.image_size, dtype=MARKER_DTYPE))
        new_image.image_type = ImageType.COLORMAP

        old_start = np.asarray(old_image.origin, dtype=int)
        new_start = np.asarray(new_image.origin, dtype=int)
        lo = np.maximum(old_start, new_start)
        hi = np.minimum(old_start + np.asarray(old_image.image_size), new_start + np.asarray(new_image.image_size))
        if np.all(hi > lo):
            source = tuple(slice(int(a - o), int(b - o)) for a, b, o in zip(lo, hi, old_start))
            target = tuple(slice(int(a - o), int(b - o)) for a, b, o in zip(lo, hi, new_start))
            new_image.raw_image[target] = old_image.raw_image[source]

        dropped = int(np.count_nonzero(old_image.raw_image)) - int(np.count_nonzero(new_image.raw_image))
        logger.info("Marker image rebound from size %s to %s; %d marker voxel(s) dropped",
                    old_image.image_size, new_image.image_size, dropped)
        self._state = Materialized(new_image)
        self._notify_marker_image_changed()

    def get_image_to_save(self):
        return self._image()

    # editing ----------------------------------------------------------------------------------------------------------
    def local_to_global_coordinates(self, local_coords):
        return self._image().local_to_global_coordinates(local_coords)

    def bound_coords_in_image(self, global_coords):
        """Move global coordinates to the nearest voxel inside the marker image."""
        return self._bound_coords_in_image(self._image(), global_coords)

    def change_marker_point(self, local_coords, colour):
        """
        Set the marker at local_coords to colour (0 erases). Coordinates outside the image are clamped to the nearest
        voxel. marker_image_changed is only emitted if the voxel value actually changed.
        """
        image = self._image()
        global_coords = image.local_to_global_coordinates(local_coords)
        global_coords = self._bound_coords_in_image(image, global_coords)

        current_value = image.get_voxel(global_coords)
        if current_value != colour:
            image.set_voxel_to_this(global_coords, colour)
            self._notify_marker_image_changed()

    def change_marker_sub_image(self, new_image: Image3D):
        """Overwrite the region covered by new_image (placed by its origin) with its voxels."""
        self._image().change_sub_image(new_image)
        self._notify_marker_image_changed()

    # slices -----------------------------------------------------------------------------------------------------------
    def get_markers_from_image(self, slice_number, orientation: ImageOrientation):
        """
        Return the markers on one slice, in row-major scan order, and the (rows, columns) size of that slice.

        XZ and YZ slices are transposed first, so that rows run along the slice axis of the volume.
        A slice number outside the image gives no markers and a size of (0, 0).
        """
        slice_ = self._get_slice(slice_number, orientation)
        if slice_ is None:
            return [], (0, 0)
        slice_size = slice_.shape

        rows, cols = np.nonzero(slice_)
        slice_markers = [Marker(x=int(c) + 1, y=int(r) + 1, colour=int(slice_[r, c])) for r, c in zip(rows, cols)]
        return slice_markers, slice_size

    # navigation -------------------------------------------------------------------------------------------------------
    def get_index_of_previous_marker(self, current_coordinate, maximum_skip, orientation: ImageOrientation):
        """Closest marked slice before current_coordinate, looking back at most maximum_skip slices."""
        furthest = max(1, current_coordinate - maximum_skip)
        return self._find_marker(orientation, furthest, current_coordinate - 1, np.max, fallback=furthest)

    def get_index_of_next_marker(self, current_coordinate, maximum_skip, orientation: ImageOrientation):
        """Closest marked slice after current_coordinate, looking ahead at most maximum_skip slices."""
        max_coordinate = self._image().image_size[orientation.axis]
        furthest = min(max_coordinate, current_coordinate + maximum_skip)
        return self._find_marker(orientation, current_coordinate + 1, furthest, np.min, fallback=furthest)

    def get_index_of_nearest_marker(self, current_coordinate, orientation: ImageOrientation):
        """Closest marked slice to current_coordinate on the whole axis. Ties go to the later slice."""
        def closest(indices):
            return indices[np.argmin(np.abs(indices - current_coordinate - NEAREST_MARKER_TIE_BIAS))]
        return self._find_marker(orientation, 1, None, closest, fallback=1)

    def get_index_of_first_marker(self, orientation: ImageOrientation):
        return self._find_marker(orientation, 1, None, np.min, fallback=1)

    def get_index_of_last_marker(self, orientation: ImageOrientation):
        max_coordinate = self._image().image_size[orientation.axis]
        return self._find_marker(orientation, 1, None, np.max, fallback=max_coordinate)

    # private ----------------------------------------------------------------------------------------------------------
    def _image(self) -> Image3D:
        if isinstance(self._state, Materialized):
            return self._state.image
        raise MarkerImageNotCreatedError("The marker image has not been created; call force_marker_image_creation()")

    def _get_slice(self, slice_number, orientation):
        slice_ = self._image().get_slice(slice_number, orientation)
        if slice_ is not None and orientation in (ImageOrientation.XZ, ImageOrientation.YZ):
            slice_ = slice_.T
        return slice_

    def _find_marker(self, orientation, first, last, choose, fallback):
        """
        Search slices first..last (1-based, inclusive; None means the end of the axis) along the orientation for
        slices holding at least one marker. Returns choose() of the marked slice numbers, or fallback if there are none.
        """
        profile = np.any(self._image().raw_image, axis=orientation.other_axes)
        if last is None:
            last = profile.size
        if last < first:
            return fallback
        indices = np.flatnonzero(profile[first - 1:last]) + first
        if indices.size == 0:
            return fallback
        return int(choose(indices))

    @staticmethod
    def _bound_coords_in_image(marker_image, global_coords):
        local_coords = marker_image.global_to_local_coordinates(global_coords)
        local_coords = np.clip(local_coords, 1, np.asarray(marker_image.image_size))
        return marker_image.local_to_global_coordinates(local_coords)

    def _notify_marker_image_changed(self):
        self.marker_image_changed.emit()
