"""
Módulo de visualización para posterize.
"""

from .image_grid import plot_image_grid, plot_posterize_results, plot_centroid_history

__all__ = ['plot_image_grid', 'plot_posterize_results', 'plot_centroid_history']
