"""
Snapshot de parámetros guardados para una imagen.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..kmeans import KMeansConfig


@dataclass
class ParameterSnapshot:
    """
    Parámetros de clustering guardados para una imagen.

    Attributes:
        metadata: dict con image_id, timestamp, description
        config: KMeansConfig con n_clusters, seeds, max_iter
    """
    config: KMeansConfig
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def image_id(self) -> str:
        return str(self.metadata.get('image_id', ''))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParameterSnapshot':
        """
        Construye un snapshot desde el dict de un JSON.

        Raises:
            KeyError: Si falta 'parameters' o alguno de sus campos obligatorios.
        """
        return cls(
            config=KMeansConfig.from_dict(data['parameters']),
            metadata=dict(data.get('metadata', {}))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metadata': dict(self.metadata),
            'parameters': self.config.to_dict()
        }
