""" image_loader.py
    Part of the markerpoint package.

    Builds Image3D objects from image files on disk. Reading is delegated to NiBabel.
"""
import logging
import os

import nibabel as nib

from .image3D import Image3D

logger = logging.getLogger(__name__)


def load_image_from_analyze_files(path, filenames):
    """
    Load a 3D image volume from Analyze 7.5 files.

    Parameters
    ----------
    path : str
        Directory holding the files.
    filenames : list[str]
        The header (.hdr) or image (.img) file of the pair; only the first entry is read.

    Returns
    -------
    Image3D
    """
    full_path_name = os.path.join(path, filenames[0])
    logger.info("Loading Analyze image %s", full_path_name)
    image = Image3D()
    image.populate_with_nibabel(nib.load(full_path_name), full_path_name)
    return image
