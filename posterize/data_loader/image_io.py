"""
Lectura y escritura de imágenes para el clustering.

El núcleo de K-Means trabaja con tres buffers por canal; este módulo hace
el resto: decodificar el archivo, separar los canales, volver a unirlos y
codificar el resultado.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image

from ..kmeans import ChannelImage, KMeansConfig, KMeansResult, run_kmeans
from ..kmeans.kmeans import IterationCallback

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_image(path: PathLike) -> np.ndarray:
    """
    Carga una imagen como array RGB.

    Args:
        path: Ruta al archivo (cualquier formato soportado por PIL).

    Returns:
        numpy array con shape (H, W, 3) y dtype uint8.

    Raises:
        FileNotFoundError: Si el archivo no existe.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Imagen no encontrada: {path}")

    with Image.open(path) as img:
        img_array = np.array(img.convert('RGB'))

    logger.info("Imagen cargada %s: cols=%d, rows=%d", path, img_array.shape[1], img_array.shape[0])
    return img_array


def save_image(image: np.ndarray, path: PathLike):
    """
    Guarda un array (H, W, 3) uint8 en disco, creando directorios si hace falta.

    El formato se deduce de la extensión del archivo.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Imagen debe tener shape (H, W, 3), tiene shape {image.shape}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(image.astype(np.uint8)).save(path)
    logger.info("Imagen guardada en %s", path)


def split_channels(image: np.ndarray) -> ChannelImage:
    """
    Separa una imagen (H, W, 3) en sus tres canales.

    Raises:
        ValueError: Si la imagen no es (H, W, 3) uint8.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Imagen debe tener shape (H, W, 3), tiene shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Imagen debe ser uint8, tiene dtype {image.dtype}")

    h, w = image.shape[:2]
    channels = cv2.split(np.ascontiguousarray(image))
    return ChannelImage(w, h, tuple(channel.reshape(-1) for channel in channels))


def merge_channels(image: ChannelImage) -> np.ndarray:
    """
    Une los tres canales de un ChannelImage en un array (H, W, 3) uint8.
    """
    h, w = image.shape
    return cv2.merge([channel.reshape(h, w).copy() for channel in image.channels])


def posterize_file(
    input_path: PathLike,
    output_path: PathLike,
    config: KMeansConfig,
    on_iteration: Optional[IterationCallback] = None
) -> KMeansResult:
    """
    Carga una imagen, aplica K-Means con semillas y guarda el resultado.

    Si la validación de semillas falla no se escribe ningún archivo.

    Args:
        input_path: Imagen de entrada.
        output_path: Ruta de salida.
        config: Configuración de K-Means.
        on_iteration: Hook opcional por iteración, ver run_kmeans().

    Returns:
        KMeansResult del clustering.

    Raises:
        FileNotFoundError: Si la imagen de entrada no existe.
        KMeansValidationError: Si las semillas no son válidas para la imagen.
    """
    image = split_channels(load_image(input_path))
    result = run_kmeans(image, config, on_iteration)

    logger.info(
        "K-Means terminado: %d pasadas, convergió=%s",
        result.n_iter, result.converged
    )

    save_image(merge_channels(result.output), output_path)
    return result
