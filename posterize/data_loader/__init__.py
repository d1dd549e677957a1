"""
Módulo de carga de datos para posterize.

Componentes principales:
- load_image / save_image: Lectura y escritura de imágenes (PIL)
- split_channels / merge_channels: Separación y unión de canales (OpenCV)
- posterize_file: Pipeline completo archivo -> K-Means -> archivo
- ParameterSnapshot: Parámetros guardados (metadata + KMeansConfig)
- ConfigLoader: Clase para cargar JSONs de parámetros e imágenes de data/

Example:
    >>> from posterize.data_loader import ConfigLoader
    >>> from posterize.kmeans import process_images_batch
    >>>
    >>> loader = ConfigLoader()
    >>> images, configs = loader.load_all()
    >>> results = process_images_batch(images, configs)
"""

from .params import ParameterSnapshot
from .image_io import load_image, save_image, split_channels, merge_channels, posterize_file
from .json_loader import ConfigLoader, load_params_file

__all__ = [
    'ParameterSnapshot',
    'load_image',
    'save_image',
    'split_channels',
    'merge_channels',
    'posterize_file',
    'ConfigLoader',
    'load_params_file',
]
