from .components.image3D import Image3D
from .components.image_loader import load_image_from_analyze_files
from .components.marker_point_image import Marker, MarkerImageNotCreatedError, MarkerPointImage
from .enumerations import ImageOrientation, ImageType
from .logging_config import configure_logging
