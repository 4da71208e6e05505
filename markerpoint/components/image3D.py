""" image3D.py
    Part of the markerpoint package.

    Notes
    -----
    Image3D is the voxel container that marker volumes are bound to. It owns the
    raw array and the geometry needed to place it in a larger, global voxel grid.

    Coordinate conventions:
        self.data has shape (R, C, S) == (rows, columns, slices)
        local coordinates are 1-based (row, column, slice) indices into self.data
        global coordinates are local + origin - 1, where origin is the 1-based
        global position of voxel (1, 1, 1)
"""
from __future__ import annotations

import logging
import os
import numpy as np
import nibabel as nib

from ..enumerations import ImageOrientation, ImageType

logger = logging.getLogger(__name__)


class Image3D:
    """
    A 3D image container with a voxel origin, local/global coordinate helpers,
    voxel and sub-image editing, and orientation-aware slice extraction.

    Public attributes:
        file_type, full_file_name, file_path, file_name, file_base_name,
        data, header, image_type, origin, voxel_size, transform,
        data_min, data_max

    Public methods:
        populate_with_nibabel(nib_image, full_path_name, base_name=None)
        image_exists()
        reset()
        blank_copy()
        change_raw_image(raw_image)
        change_sub_image(new_image)
        get_voxel(global_coords)
        set_voxel_to_this(global_coords, value)
        get_slice(slice_number, orientation)
        local_to_global_coordinates(local_coords)
        global_to_local_coordinates(global_coords)
        voxel_to_world(local_coords)
        world_to_voxel(xyz)
    """

    def __init__(self, raw_image=None, origin=None, image_type=ImageType.GRAYSCALE):
        # identification
        self.file_type = ''        # 'nifti' or 'analyze' when loaded from disk
        self.full_file_name = ''   # full path and name of the dataset
        self.file_path = ''        # path to the dataset
        self.file_name = ''        # file name, including extension(s)
        self.file_base_name = ''   # file name without extension(s)

        # voxel data
        self.data: np.ndarray | None = None
        self.header = None
        self.image_type = image_type

        # geometry
        self.origin = np.ones(3, dtype=int)
        self.voxel_size = [1.0, 1.0, 1.0]
        self.transform = np.eye(4)  # affine (0-based ijk)→world
        self._image_size = (0, 0, 0)

        self.data_min = None
        self.data_max = None

        if raw_image is not None:
            self.change_raw_image(raw_image)
        if origin is not None:
            self.origin = np.asarray(origin, dtype=int).reshape(3)

    # ---------------------------------------------------------------------
    # Loading / population
    # ---------------------------------------------------------------------
    def populate_with_nibabel(self, nib_image, full_path_name, base_name=None):
        """
        Populate from a NiBabel spatial image (NIfTI or Analyze 7.5).

        Parameters
        ----------
        nib_image : nib.analyze.AnalyzeImage
        full_path_name : str
        base_name : Optional[str]
        """
        # as_closest_canonical() flips and/or permutes axes to RAS+ and adjusts the affine to match.
        # No resampling happens here. Unscaled images keep their on-disk dtype; images with scl_slope/scl_inter
        # keep the scaled (float) values.
        canonical = nib.as_closest_canonical(nib_image)

        slope, inter = nib_image.header.get_slope_inter()
        is_scaled = (slope is not None and slope != 1) or (inter is not None and inter != 0)
        raw_image = np.asanyarray(canonical.dataobj)
        if not is_scaled:
            raw_image = raw_image.astype(nib_image.header.get_data_dtype())
        self.change_raw_image(raw_image)
        self.header = canonical.header

        # Filenames / types
        self.full_file_name = full_path_name
        self.file_path = os.path.dirname(full_path_name)
        self.file_name = os.path.basename(full_path_name)
        if base_name is not None:
            self.file_base_name = base_name
        else:
            base_name_only = os.path.splitext(self.file_name)[0]
            self.file_base_name = os.path.splitext(base_name_only)[0]  # handles .nii.gz
        self.file_type = 'nifti' if isinstance(nib_image, nib.Nifti1Pair) else 'analyze'

        self.voxel_size = [float(z) for z in canonical.header.get_zooms()[:3]]
        self.transform = canonical.affine
        self.origin = np.ones(3, dtype=int)
        self.image_type = ImageType.SCALED if is_scaled else ImageType.GRAYSCALE

        self.data_min = float(np.min(self.data))
        self.data_max = float(np.max(self.data))

        logger.debug("Loaded %s image %s with size %s", self.file_type, self.file_name, self._image_size)

    # ---------------------------------------------------------------------
    # Raw data
    # ---------------------------------------------------------------------
    @property
    def raw_image(self):
        return self.data

    @property
    def image_size(self):
        """Voxel dimensions (rows, columns, slices). Kept by blank copies that hold no data yet."""
        return self._image_size

    def image_exists(self):
        return self.data is not None

    def reset(self):
        """Zero every voxel in place. The array itself is kept."""
        if self.data is not None:
            self.data[...] = 0

    def blank_copy(self):
        """Return an Image3D with this image's geometry and type but no voxel data."""
        copy = Image3D(origin=self.origin.copy(), image_type=self.image_type)
        copy._image_size = self._image_size
        copy.voxel_size = list(self.voxel_size)
        copy.transform = np.array(self.transform, copy=True)
        return copy

    def change_raw_image(self, raw_image):
        raw_image = np.asarray(raw_image)
        if raw_image.ndim != 3:
            raise ValueError(f"Raw image must be 3D, got shape {raw_image.shape}")
        self.data = raw_image
        self._image_size = tuple(int(s) for s in raw_image.shape)

    def change_sub_image(self, new_image):
        """
        Overwrite the region of this image covered by new_image, which is placed by its own origin.

        Parameters
        ----------
        new_image : Image3D
            Source voxels; its origin is in the same global coordinate system as this image's.
        """
        start = np.asarray(new_image.origin, dtype=int) - self.origin
        stop = start + np.asarray(new_image.raw_image.shape, dtype=int)
        if np.any(start < 0) or np.any(stop > np.asarray(self._image_size)):
            raise ValueError(f"Sub-image at origin {list(new_image.origin)} with size "
                             f"{list(new_image.raw_image.shape)} does not fit inside image of size "
                             f"{list(self._image_size)} at origin {list(self.origin)}")
        region = tuple(slice(int(a), int(b)) for a, b in zip(start, stop))
        self.data[region] = new_image.raw_image.astype(self.data.dtype, copy=False)

    # ---------------------------------------------------------------------
    # Voxel access (global coordinates)
    # ---------------------------------------------------------------------
    def _array_index(self, global_coords):
        local_coords = self.global_to_local_coordinates(global_coords)
        return tuple(int(c) - 1 for c in local_coords)

    def get_voxel(self, global_coords):
        return self.data[self._array_index(global_coords)]

    def set_voxel_to_this(self, global_coords, value):
        self.data[self._array_index(global_coords)] = value

    # ---------------------------------------------------------------------
    # Slice extraction
    # ---------------------------------------------------------------------
    def get_slice(self, slice_number, orientation: ImageOrientation):
        """
        Return the 2D slice at the 1-based slice_number along the orientation's axis,
        or None if the slice lies outside the image.
        """
        if 1 <= slice_number <= self._image_size[orientation.axis]:
            return np.take(self.data, slice_number - 1, axis=orientation.axis)
        return None

    # ---------------------------------------------------------------------
    # Coordinate transforms
    # ---------------------------------------------------------------------
    def local_to_global_coordinates(self, local_coords):
        return np.asarray(local_coords, dtype=int) + self.origin - 1

    def global_to_local_coordinates(self, global_coords):
        return np.asarray(global_coords, dtype=int) - self.origin + 1

    def voxel_to_world(self, local_coords):
        """Map 1-based local voxel coordinates → world (x,y,z) using the affine."""
        return nib.affines.apply_affine(self.transform, np.asarray(local_coords, dtype=float) - 1)

    def world_to_voxel(self, xyz):
        """Map world (x,y,z) → 1-based local voxel coordinates using the inverse affine."""
        inv_aff = np.linalg.inv(self.transform)
        return nib.affines.apply_affine(inv_aff, xyz) + 1
