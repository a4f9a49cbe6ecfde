"""
K-means clustering engine for dominant color extraction.

Pipeline: pixel sampling -> K-means++ seeding -> Lloyd iterations
(assign / update) until the centroids stop moving or the iteration budget
runs out -> ranked cluster results.

Everything here is a pure function of its inputs plus the random generator
handed to the seeder, so independent images can be processed concurrently
without coordination.
"""

from typing import List

import numpy as np
from loguru import logger

from .errors import InvalidArgumentError
from .models import Cluster, ClusterResult, ConvergenceState, KMeansRun


def sample_pixels(image_rgb: np.ndarray) -> np.ndarray:
    """
    Flatten an RGB(A) image into one sample per pixel.

    Args:
        image_rgb: (H, W, 3) or (H, W, 4) uint8 array; alpha is ignored

    Returns:
        (H*W, 3) uint8 array in row-major order

    Raises:
        InvalidArgumentError: If the image is empty or not RGB shaped
    """
    if image_rgb.ndim != 3 or image_rgb.shape[2] not in (3, 4):
        raise InvalidArgumentError(f"Expected an (H, W, 3) RGB image, got shape {image_rgb.shape}")

    height, width = image_rgb.shape[:2]
    if width == 0 or height == 0:
        raise InvalidArgumentError("Image dimensions cannot be zero")

    samples = np.ascontiguousarray(image_rgb[:, :, :3], dtype=np.uint8).reshape(-1, 3)
    logger.debug(f"Sampled {samples.shape[0]} pixels from {width}x{height} image")
    return samples


def _distances_to(points: np.ndarray, centroid: np.ndarray) -> np.ndarray:
    """Euclidean distance from every point to one centroid."""
    diff = points - centroid.astype(np.float64)
    return np.sqrt(np.sum(diff * diff, axis=1))


def choose_weighted_index(weights: np.ndarray, rng: np.random.Generator) -> int:
    """
    Pick an index with probability proportional to its weight.

    Draws a threshold in [0, sum(weights)) and walks the weights subtracting
    each from it; the first index where the threshold drops to zero or below
    wins. If floating point drift leaves nothing selected, the last index is
    returned.
    """
    total = float(np.sum(weights))
    threshold = rng.random() * total

    # First index whose running total reaches the threshold
    cumulative = np.cumsum(weights)
    index = int(np.searchsorted(cumulative, threshold, side="left"))
    if index >= len(weights):
        return len(weights) - 1
    return index


def seed_centroids(samples: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose k initial centroids with K-means++.

    For k == 1 the first sample is used and no randomness is consumed.
    Otherwise the first centroid is uniform over all samples and each
    further one is drawn with probability proportional to the sample's
    distance (not squared) to its nearest already-chosen centroid.

    Args:
        samples: (N, 3) uint8 samples, N >= 1
        k: Number of centroids, >= 1
        rng: Random source; pass a seeded generator for reproducible output

    Returns:
        (k, 3) int64 centroid array, possibly with repeated rows when the
        image has fewer than k distinct colors
    """
    if samples.shape[0] == 0:
        raise InvalidArgumentError("Cannot seed centroids from an empty sample set")
    if k < 1:
        raise InvalidArgumentError("Centroid count must be greater than 0")

    if k == 1:
        return samples[:1].astype(np.int64)

    n_samples = samples.shape[0]
    points = samples.astype(np.float64)

    first = samples[int(rng.integers(n_samples))].astype(np.int64)
    centroids = [first]
    nearest = _distances_to(points, first)

    for _ in range(1, k):
        index = choose_weighted_index(nearest, rng)
        centroid = samples[index].astype(np.int64)
        centroids.append(centroid)
        nearest = np.minimum(nearest, _distances_to(points, centroid))

    logger.debug(f"Seeded {k} centroids with K-means++")
    return np.array(centroids, dtype=np.int64)


def assign_clusters(samples: np.ndarray, centroids: np.ndarray) -> List[Cluster]:
    """
    Partition samples by nearest centroid.

    Returns one Cluster per centroid, in centroid order. Ties go to the
    lowest centroid index. Clusters may come back empty.
    """
    points = samples.astype(np.int64)
    best = np.full(points.shape[0], np.iinfo(np.int64).max, dtype=np.int64)
    labels = np.zeros(points.shape[0], dtype=np.intp)

    # Squared distance keeps the ordering and stays exact in integers
    for i, centroid in enumerate(centroids.astype(np.int64)):
        diff = points - centroid
        sq_dist = np.einsum('ij,ij->i', diff, diff)
        closer = sq_dist < best  # strict, so ties keep the earlier centroid
        best[closer] = sq_dist[closer]
        labels[closer] = i

    return [
        Cluster(centroid=centroids[i].copy(), members=samples[labels == i])
        for i in range(centroids.shape[0])
    ]


def update_centroids(clusters: List[Cluster]) -> np.ndarray:
    """
    Recompute centroids as the per-channel mean of each cluster.

    Means are rounded half-up. Empty clusters produce no row, so the result
    can be shorter than the input.

    Returns:
        (m, 3) int64 array, m = number of non-empty clusters
    """
    rows = []
    for cluster in clusters:
        n = cluster.size
        if n == 0:
            continue
        totals = cluster.members.sum(axis=0, dtype=np.int64)
        # floor(totals / n + 0.5) in exact integer arithmetic
        rows.append((2 * totals + n) // (2 * n))

    return np.array(rows, dtype=np.int64).reshape(-1, 3)


def centroids_equal(a: np.ndarray, b: np.ndarray) -> bool:
    """Same number of centroids with identical channels in the same order."""
    if a.shape != b.shape:
        return False
    return bool(np.array_equal(a, b))


def run_kmeans(samples: np.ndarray, k: int, max_iterations: int,
               rng: np.random.Generator) -> KMeansRun:
    """
    Run Lloyd's algorithm from K-means++ seeds.

    Repeats assign -> update up to max_iterations times. Stops early in the
    CONVERGED state once an update leaves the centroids unchanged; a change
    in centroid count counts as a change. Exhausting the budget leaves the
    run in the RUNNING state with the last computed centroids.
    """
    if max_iterations < 1:
        raise InvalidArgumentError("Max iterations must be greater than 0")

    centroids = seed_centroids(samples, k, rng)
    clusters: List[Cluster] = []
    state = ConvergenceState.RUNNING
    iterations = 0

    while iterations < max_iterations:
        iterations += 1
        clusters = assign_clusters(samples, centroids)
        new_centroids = update_centroids(clusters)

        if centroids_equal(centroids, new_centroids):
            centroids = new_centroids
            state = ConvergenceState.CONVERGED
            break

        if new_centroids.shape[0] < centroids.shape[0]:
            logger.debug(
                f"Iteration {iterations}: dropped "
                f"{centroids.shape[0] - new_centroids.shape[0]} empty cluster(s)"
            )
        centroids = new_centroids

    logger.debug(
        f"K-means finished after {iterations} iteration(s) in state {state.name} "
        f"with {centroids.shape[0]} centroid(s)"
    )
    return KMeansRun(centroids=centroids, clusters=clusters,
                     iterations=iterations, state=state)


def build_cluster_results(run: KMeansRun, total_samples: int) -> List[ClusterResult]:
    """
    Convert a finished run into dominance-ranked results.

    Each non-empty cluster of the last assign pass is paired with the
    centroid the last update computed for it. Percentages are relative to
    total_samples. Results are sorted by pixel_count descending; the sort is
    stable, so equal counts keep centroid order.
    """
    populated = [cluster for cluster in run.clusters if cluster.size > 0]

    results = []
    for centroid, cluster in zip(run.centroids, populated):
        results.append(ClusterResult(
            color=(int(centroid[0]), int(centroid[1]), int(centroid[2])),
            pixel_count=cluster.size,
            percentage=cluster.size / total_samples * 100,
        ))

    results.sort(key=lambda result: result.pixel_count, reverse=True)
    return results
