"""
Cargador de archivos JSON con parámetros de clustering guardados.

Proporciona la clase ConfigLoader para cargar y guardar archivos JSON con
la configuración de K-Means (K, semillas, tope de iteraciones) de cada
imagen, así como las imágenes correspondientes.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..kmeans import KMeansConfig
from .image_io import load_image
from .params import ParameterSnapshot

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp', '.tif', '.tiff')


def load_params_file(json_path: Path) -> ParameterSnapshot:
    """
    Carga un archivo JSON de parámetros.

    Formato esperado:
        {
            "metadata": {"image_id": "koala", "timestamp": "...", "description": "..."},
            "parameters": {"n_clusters": 3, "seeds": [647, 793, 1661, 1019, 362, 939],
                           "max_iter": 10}
        }

    Raises:
        FileNotFoundError: Si el archivo no existe.
        json.JSONDecodeError: Si el archivo JSON está malformado.
        KeyError: Si el JSON no tiene la estructura esperada.
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Archivo de parámetros no encontrado: {json_path}")

    try:
        with open(json_path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Error al parsear JSON de {json_path}: {e.msg}",
            e.doc,
            e.pos
        ) from e

    try:
        snapshot = ParameterSnapshot.from_dict(data)
    except KeyError as e:
        raise KeyError(
            f"El JSON no tiene la estructura esperada.\n"
            f"Archivo: {json_path}\n"
            f"Campo faltante: {e}\n"
            f"Estructura esperada: {{'metadata': {{...}}, "
            f"'parameters': {{'n_clusters': ..., 'seeds': [...]}}}}"
        ) from e

    logger.debug("Parámetros cargados de %s: %s", json_path, snapshot.config)
    return snapshot


class ConfigLoader:
    """
    Cargador de parámetros e imágenes de un directorio de datos.

    Los archivos JSON siguen el formato:
        params_{image_id}_{timestamp}.json

    Example:
        >>> loader = ConfigLoader(data_dir=Path('data/'))
        >>> snapshot = loader.load_params('koala')
        >>> print(snapshot.config.n_clusters)  # 3
        >>> print(loader.get_available_images())  # ['circles', 'koala']
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Inicializa el cargador.

        Args:
            data_dir: Directorio con los JSON e imágenes.
                     Si None, usa ./data/ del directorio actual.

        Raises:
            FileNotFoundError: Si el directorio no existe.
        """
        if data_dir is None:
            data_dir = Path.cwd() / 'data'

        self.data_dir = Path(data_dir)

        if not self.data_dir.exists():
            raise FileNotFoundError(
                f"El directorio de datos no existe: {self.data_dir}"
            )

    @staticmethod
    def _image_id_from_path(json_path: Path) -> str:
        # params_{image_id}_{YYYYmmdd}_{HHMMSS}; el image_id puede tener '_'
        return json_path.stem[len('params_'):].rsplit('_', 2)[0]

    def _find_json_for_image(self, image_id: str) -> Optional[Path]:
        """
        Busca el archivo JSON más reciente para una imagen.

        Returns:
            Path al archivo más reciente (por fecha de modificación),
            o None si no hay ninguno.
        """
        json_files = [
            path for path in self.data_dir.glob(f"params_{image_id}_*.json")
            if self._image_id_from_path(path) == image_id
        ]

        if not json_files:
            return None

        json_files.sort(key=lambda p: p.stat().st_mtime, reverse=True)
        return json_files[0]

    def load_params(self, image_id: str) -> ParameterSnapshot:
        """
        Carga los parámetros guardados para una imagen.

        Raises:
            FileNotFoundError: Si no hay JSON para el image_id.
            json.JSONDecodeError: Si el archivo JSON está malformado.
            KeyError: Si el JSON no tiene la estructura esperada.
        """
        json_path = self._find_json_for_image(image_id)

        if json_path is None:
            available = self.get_available_images()
            raise FileNotFoundError(
                f"No se encontró archivo JSON para image_id '{image_id}'.\n"
                f"Buscado en: {self.data_dir}\n"
                f"Patrón: params_{image_id}_*.json\n"
                f"Imágenes disponibles: {available}"
            )

        return load_params_file(json_path)

    def save_params(
        self,
        image_id: str,
        config: KMeansConfig,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Path:
        """
        Guarda la configuración como params_{image_id}_{timestamp}.json.

        Returns:
            Path del archivo escrito.
        """
        now = datetime.now()
        snapshot = ParameterSnapshot(
            config=config,
            metadata={
                'image_id': image_id,
                'timestamp': now.isoformat(),
                **(metadata or {})
            }
        )

        json_path = self.data_dir / f"params_{image_id}_{now.strftime('%Y%m%d_%H%M%S')}.json"
        with open(json_path, 'w') as f:
            json.dump(snapshot.to_dict(), f, indent=2)

        logger.info("Parámetros guardados en %s", json_path)
        return json_path

    def get_available_images(self) -> List[str]:
        """
        Lista los image_ids que tienen archivos JSON, ordenados.
        """
        image_ids = {
            self._image_id_from_path(path)
            for path in self.data_dir.glob("params_*.json")
        }
        return sorted(image_ids)

    def load_image(self, image_id: str) -> np.ndarray:
        """
        Carga la imagen {image_id}.{jpg,png,...} del directorio de datos.

        Returns:
            numpy array con shape (H, W, 3) y dtype uint8.

        Raises:
            FileNotFoundError: Si la imagen no existe.
        """
        for extension in IMAGE_EXTENSIONS:
            image_path = self.data_dir / f"{image_id}{extension}"
            if image_path.exists():
                return load_image(image_path)

        raise FileNotFoundError(
            f"Imagen '{image_id}' no encontrada en {self.data_dir}\n"
            f"Extensiones buscadas: {list(IMAGE_EXTENSIONS)}"
        )

    def load_image_and_params(self, image_id: str) -> Tuple[np.ndarray, ParameterSnapshot]:
        """Carga imagen y parámetros juntos."""
        return self.load_image(image_id), self.load_params(image_id)

    def load_all(
        self,
        image_ids: Optional[List[str]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, KMeansConfig]]:
        """
        Carga varias imágenes con sus configuraciones.

        Args:
            image_ids: IDs a cargar. Si None, todos los de get_available_images().

        Returns:
            Tupla (images, configs), listas para process_images_batch().
        """
        if image_ids is None:
            image_ids = self.get_available_images()

        images = {}
        configs = {}
        for image_id in image_ids:
            image, snapshot = self.load_image_and_params(image_id)
            images[image_id] = image
            configs[image_id] = snapshot.config

        return images, configs
