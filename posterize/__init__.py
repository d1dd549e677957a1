"""
posterize - Seeded K-Means color posterization.

Este paquete contiene la implementación de K-Means con semillas fijas para
cuantizar los colores de una imagen en K clusters, junto con utilidades de
carga de imágenes/parámetros y visualización de resultados.
"""

__version__ = "0.1.0"
