"""
Utilidades de visualización para resultados de K-Means.

Proporciona funciones para mostrar imágenes en cuadrícula, comparar la
imagen original con la posterizada y seguir la evolución de los centroides.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import List, Tuple, Dict, Optional

from ..kmeans import KMeansResult


def plot_image_grid(
    images: List[np.ndarray],
    titles: List[str],
    figsize: Tuple[int, int] = (18, 6)
) -> plt.Figure:
    """
    Crea un grid de imágenes en una sola fila.

    Args:
        images: Lista de arrays RGB con shape (H, W, 3).
        titles: Lista de títulos, misma longitud que images.
        figsize: Tamaño de la figura (ancho, alto) en pulgadas.

    Returns:
        fig: Figura de matplotlib.

    Raises:
        ValueError: Si la longitud de images y titles no coincide.
    """
    if len(images) != len(titles):
        raise ValueError(
            f"El número de imágenes ({len(images)}) debe coincidir "
            f"con el número de títulos ({len(titles)})"
        )

    n_images = len(images)
    fig, axes = plt.subplots(1, n_images, figsize=figsize)

    # Si solo hay una imagen, axes no es un array
    if n_images == 1:
        axes = [axes]

    for idx, (img, title) in enumerate(zip(images, titles)):
        axes[idx].imshow(img)
        axes[idx].axis('off')
        axes[idx].set_title(title, fontsize=14, pad=10)

    plt.tight_layout()

    return fig


def plot_posterize_results(
    original_images: Dict[str, np.ndarray],
    results: Dict[str, KMeansResult],
    image_ids: Optional[List[str]] = None,
    figsize: Optional[Tuple[int, int]] = None
) -> plt.Figure:
    """
    Visualiza resultados de K-Means en un grid de N filas x 3 columnas.

    Para cada imagen:
    - Columna 1: Imagen original
    - Columna 2: Imagen posterizada (K colores)
    - Columna 3: Barras con los colores de los centroides y su frecuencia

    Args:
        original_images: {image_id: array (H, W, 3) uint8}
        results: {image_id: KMeansResult}
        image_ids: IDs a mostrar en orden. Por defecto, los de results.
        figsize: Tamaño de la figura. Por defecto (18, 6 * n_filas).

    Returns:
        fig: Figura de matplotlib.

    Raises:
        ValueError: Si faltan image_ids en alguno de los diccionarios.
    """
    if image_ids is None:
        image_ids = sorted(results.keys())

    missing_in_original = [img_id for img_id in image_ids if img_id not in original_images]
    missing_in_results = [img_id for img_id in image_ids if img_id not in results]

    if missing_in_original or missing_in_results:
        error_msg = "Faltan image_ids en los diccionarios:\n"
        if missing_in_original:
            error_msg += f"  - Faltan en original_images: {missing_in_original}\n"
        if missing_in_results:
            error_msg += f"  - Faltan en results: {missing_in_results}\n"
        raise ValueError(error_msg)

    n_images = len(image_ids)
    if figsize is None:
        figsize = (18, 6 * n_images)

    fig, axes = plt.subplots(n_images, 3, figsize=figsize)

    # Si solo hay una imagen, axes no es 2D
    if n_images == 1:
        axes = axes.reshape(1, -1)

    for row_idx, img_id in enumerate(image_ids):
        result = results[img_id]
        n_clusters = len(result.centroids)

        # === COLUMNA 1: Imagen Original ===
        ax_original = axes[row_idx, 0]
        ax_original.imshow(original_images[img_id])
        ax_original.axis('off')
        ax_original.set_title(f'{img_id} - Original', fontsize=12, pad=10)

        # === COLUMNA 2: Imagen Posterizada ===
        ax_clustered = axes[row_idx, 1]
        ax_clustered.imshow(result.to_array())
        ax_clustered.axis('off')
        ax_clustered.set_title(
            f'Posterizada (K={n_clusters}, {result.n_iter} pasadas)',
            fontsize=12,
            pad=10
        )

        # === COLUMNA 3: Colores de los centroides ===
        ax_colors = axes[row_idx, 2]
        n_pixels = max(int(result.counts.sum()), 1)
        cluster_percentages = (result.counts / n_pixels) * 100

        x_pos = np.arange(n_clusters)
        bars = ax_colors.bar(
            x_pos,
            cluster_percentages,
            color=np.clip(result.centroids, 0, 255) / 255.0,
            edgecolor='black',
            linewidth=1.5
        )

        ax_colors.set_xlabel('Cluster', fontsize=10)
        ax_colors.set_ylabel('Frecuencia (%)', fontsize=10)
        ax_colors.set_title('Centroides', fontsize=12, pad=10)
        ax_colors.set_xticks(x_pos)
        ax_colors.set_xticklabels([f'{i}' for i in range(n_clusters)])
        ax_colors.set_ylim(0, max(max(cluster_percentages), 1.0) * 1.1)

        for bar, percentage in zip(bars, cluster_percentages):
            ax_colors.text(
                bar.get_x() + bar.get_width() / 2.,
                bar.get_height(),
                f'{percentage:.1f}%',
                ha='center',
                va='bottom',
                fontsize=8
            )

    plt.tight_layout()

    return fig


def plot_centroid_history(
    result: KMeansResult,
    channel_names: Tuple[str, str, str] = ('R', 'G', 'B'),
    figsize: Tuple[int, int] = (15, 4)
) -> plt.Figure:
    """
    Grafica el valor de cada canal de cada centroide por pasada.

    Una subfigura por canal, una línea por centroide.

    Raises:
        ValueError: Si el resultado no tiene ninguna pasada.
    """
    if not result.history:
        raise ValueError("El resultado no tiene pasadas que graficar")

    history = np.stack(result.history)  # (n_iter, K, 3)
    passes = np.arange(1, len(history) + 1)

    fig, axes = plt.subplots(1, 3, figsize=figsize, sharey=True)

    for c, ax in enumerate(axes):
        for k in range(history.shape[1]):
            ax.plot(passes, history[:, k, c], marker='o', label=f'Cluster {k}')
        ax.set_title(f'Canal {channel_names[c]}', fontsize=12)
        ax.set_xlabel('Pasada', fontsize=10)
        ax.set_xticks(passes)

    axes[0].set_ylabel('Valor del centroide', fontsize=10)
    axes[0].set_ylim(0, 255)
    axes[-1].legend(fontsize=8)

    plt.tight_layout()

    return fig
