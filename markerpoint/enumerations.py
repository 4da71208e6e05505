""" enumerations.py
Part of the markerpoint package, marker-point annotation for 3D image volumes.

This module simply defines enumerations used in the markerpoint package.
"""

from enum import Enum


class ImageOrientation(Enum):
    """ This is an enumeration of the three orthogonal slice orientations, named by the image plane each slice lies
     in. Each member carries the array axis it slices along and the two axes collapsed when building a per-slice
     marker profile. Array axes are (row, column, slice) == (y, x, z). """
    XZ = (0, "coronal")
    YZ = (1, "sagittal")
    XY = (2, "axial")

    def __init__(self, axis_, view_):
        self.axis = axis_
        self.view = view_
        self.other_axes = tuple(a for a in (0, 1, 2) if a != axis_)


class ImageType(Enum):
    """ What the voxel values of an Image3D mean. COLORMAP images hold label/category indices, not intensities.
    SCALED images were stored with a slope/intercept and hold the rescaled values. """
    GRAYSCALE = "grayscale"
    COLORMAP = "colormap"
    SCALED = "scaled"
