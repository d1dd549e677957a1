import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import numpy as np
    from pathlib import Path

    from posterize.kmeans import KMeansConfig, SeededKMeans, process_images_batch
    from posterize.data_loader import ConfigLoader
    from posterize.viz import plot_image_grid, plot_posterize_results, plot_centroid_history
    return (
        ConfigLoader,
        KMeansConfig,
        Path,
        SeededKMeans,
        mo,
        np,
        plot_centroid_history,
        plot_image_grid,
        plot_posterize_results,
        process_images_batch,
    )


@app.cell
def _(mo):
    mo.md("""
    # Posterización con K-Means de semillas fijas

    Este notebook aplica K-Means a una imagen RGB partiendo de **semillas** elegidas
    a mano: cada semilla es una posición `(col, row)` de la imagen y su color es el
    punto de partida de un centroide.

    En cada iteración:
    1. Se recalculan los centroides como la media (truncada) de los píxeles asignados
    2. Si ningún centroide cambia, el algoritmo termina
    3. Si no, cada píxel se asigna al centroide más cercano y toma su color

    El número de iteraciones está acotado (10 por defecto).
    """)
    return


@app.cell
def _(np):
    # Imagen sintética: cuatro bloques de color con ruido
    rng = np.random.default_rng(0)
    blocks = np.zeros((120, 160, 3), dtype=np.int64)
    blocks[:60, :80] = (200, 40, 40)
    blocks[:60, 80:] = (40, 180, 60)
    blocks[60:, :80] = (30, 60, 200)
    blocks[60:, 80:] = (230, 220, 90)
    blocks += rng.integers(-25, 26, size=blocks.shape)
    blocks_image = np.clip(blocks, 0, 255).astype(np.uint8)
    return (blocks_image,)


@app.cell
def _(Path, ConfigLoader, KMeansConfig):
    # Parámetros guardados en data/ si existen; si no, semillas por defecto
    data_dir = Path.cwd() / 'data'
    if data_dir.exists() and 'blocks' in ConfigLoader(data_dir).get_available_images():
        blocks_config = ConfigLoader(data_dir).load_params('blocks').config
    else:
        blocks_config = KMeansConfig(
            n_clusters=4,
            seeds=[10, 10, 150, 10, 10, 110, 150, 110]
        )
    blocks_config
    return (blocks_config,)


@app.cell
def _(SeededKMeans, blocks_config, blocks_image, plot_image_grid):
    kmeans = SeededKMeans(blocks_config).fit_image(blocks_image)

    fig_grid = plot_image_grid(
        [blocks_image, kmeans.get_segmented_image()],
        ['Original', f'Posterizada (K={blocks_config.n_clusters})'],
        figsize=(12, 5)
    )
    fig_grid
    return (kmeans,)


@app.cell
def _(kmeans, mo):
    mo.md(f"""
    ## Resultado

    - **Pasadas de asignación**: {kmeans.result.n_iter}
    - **Convergió**: {kmeans.result.converged}
    - **Inercia J(V)**: {kmeans.inertia}
    - **Centroides**: {kmeans.centroids.tolist()}
    """)
    return


@app.cell
def _(kmeans, plot_centroid_history):
    fig_history = plot_centroid_history(kmeans.result)
    fig_history
    return


@app.cell
def _(
    KMeansConfig,
    blocks_config,
    blocks_image,
    plot_posterize_results,
    process_images_batch,
):
    # Misma imagen con distintos K para comparar
    batch_images = {'K=4': blocks_image, 'K=2': blocks_image}
    batch_configs = {
        'K=4': blocks_config,
        'K=2': KMeansConfig(n_clusters=2, seeds=[10, 10, 150, 110]),
    }
    batch_results = process_images_batch(batch_images, batch_configs)

    fig_batch = plot_posterize_results(batch_images, batch_results, image_ids=['K=2', 'K=4'])
    fig_batch
    return


if __name__ == "__main__":
    app.run()
