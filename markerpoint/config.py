""" config.py
Package-wide settings for markerpoint.
"""
import numpy as np

# voxel type of the marker volume; 0 means "no marker", 1..255 is the marker colour index
MARKER_DTYPE = np.uint8

# nudges the nearest-marker search so that a marker after the current slice wins a tie
NEAREST_MARKER_TIE_BIAS = 0.1

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
