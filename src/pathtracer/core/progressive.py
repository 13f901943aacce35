"""Progressive renderer for iterative sample accumulation.

This module drives the path sampler over a whole image:
- One jittered primary ray per pixel per iteration
- Rows partitioned across worker threads
- One random generator and one accumulation buffer per worker, merged into
  the image after each pass
- Progress callbacks and a generator interface for interactive use

Random generators are spawned from a single SeedSequence, so a renderer
created with a fixed seed and worker count produces the same image every
time.

Example:
    >>> from pathtracer.core.progressive import ProgressiveRenderer
    >>> from pathtracer.core.sampler import PathSampler
    >>> from pathtracer.scene.cornell_box import create_cornell_box_scene
    >>>
    >>> scene, camera = create_cornell_box_scene()
    >>> renderer = ProgressiveRenderer(scene, camera, PathSampler(4, 4), 64, 64, seed=1)
    >>> renderer.render(10)  # 10 iterations
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import numpy as np
import numpy.typing as npt

from pathtracer.camera.pinhole import PinholeCamera
from pathtracer.core.sampler import PathSampler
from pathtracer.preview.display import ToneMapMethod
from pathtracer.preview.export import image_to_uint8, save_png_from_array
from pathtracer.scene.scene import Scene

logger = logging.getLogger(__name__)

# Maximum supported image dimensions
MAX_IMAGE_WIDTH = 4096
MAX_IMAGE_HEIGHT = 4096

# Type alias for progress callback
# Callback receives (current_samples, total_target_samples)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates samples over time.

    Each call to render() adds whole iterations: every pixel receives one
    more sampler estimate. The image is the running average.

    Attributes:
        scene: The scene being rendered (read-only while rendering).
        camera: The camera producing primary rays.
        sampler: The path sampler configuration.
    """

    def __init__(
        self,
        scene: Scene,
        camera: PinholeCamera,
        sampler: PathSampler,
        width: int,
        height: int,
        *,
        seed: int | None = None,
        workers: int = 1,
    ) -> None:
        """Initialize the progressive renderer.

        Args:
            scene: The scene to render.
            camera: The camera producing primary rays.
            sampler: The path sampler.
            width: Image width in pixels (max MAX_IMAGE_WIDTH).
            height: Image height in pixels (max MAX_IMAGE_HEIGHT).
            seed: Seed for the random generators (None for fresh entropy).
            workers: Number of worker threads (>= 1).

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum,
                or workers is less than one.
        """
        _check_dimensions(width, height)
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.scene = scene
        self.camera = camera
        self.sampler = sampler
        self._width = width
        self._height = height
        self._workers = workers
        self._seed_sequence = np.random.SeedSequence(seed)
        self._buffer = np.zeros((height, width, 3), dtype=np.float64)
        self._iterations = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def workers(self) -> int:
        return self._workers

    @property
    def sample_count(self) -> int:
        """Get the current number of accumulated samples per pixel."""
        return self._iterations

    def reset(self) -> None:
        """Reset the accumulator for a new render.

        Clears the color buffer and sample count without changing the image
        dimensions.
        """
        self._buffer.fill(0.0)
        self._iterations = 0

    def resize(self, width: int, height: int) -> None:
        """Resize the render target and reset accumulator.

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum.
        """
        _check_dimensions(width, height)
        self._width = width
        self._height = height
        self._buffer = np.zeros((height, width, 3), dtype=np.float64)
        self._iterations = 0

    def render(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render samples progressively with optional progress callback.

        Args:
            num_samples: Number of iterations to add.
            batch_size: Number of iterations to render before each callback.
            callback: Optional callback called after each batch with
                (current_total_samples, target_total_samples).
        """
        for current, target in self.render_progressive(num_samples, batch_size):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self,
        num_samples: int = 1,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render samples progressively, yielding progress after each batch.

        Stopping the iteration early leaves every completed iteration in the
        accumulator.

        Yields:
            Tuple of (current_total_samples, target_total_samples).
        """
        if num_samples <= 0:
            return

        target_samples = self.sample_count + num_samples
        remaining = num_samples
        while remaining > 0:
            batch = min(max(batch_size, 1), remaining)
            for _ in range(batch):
                self.render_iteration()
            remaining -= batch
            yield (self.sample_count, target_samples)

    def render_iteration(self) -> float:
        """Add one sample to every pixel.

        Returns:
            Wall-clock time of the iteration in seconds.
        """
        start = time.perf_counter()
        seeds = self._seed_sequence.spawn(self._workers)
        partitions = [list(range(i, self._height, self._workers)) for i in range(self._workers)]

        if self._workers == 1:
            results = [self._render_rows(partitions[0], np.random.default_rng(seeds[0]))]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                futures = [
                    pool.submit(self._render_rows, rows, np.random.default_rng(child))
                    for rows, child in zip(partitions, seeds)
                ]
                results = [future.result() for future in futures]

        # Merge per-worker buffers
        for rows, partial in zip(partitions, results):
            if rows:
                self._buffer[rows] += partial

        self._iterations += 1
        elapsed = time.perf_counter() - start
        logger.info(
            "Iteration %d finished in %.3fs (%dx%d, %d workers)",
            self._iterations,
            elapsed,
            self._width,
            self._height,
            self._workers,
        )
        return elapsed

    def _render_rows(self, rows: Sequence[int], rng: np.random.Generator) -> npt.NDArray[np.float64]:
        partial = np.zeros((len(rows), self._width, 3), dtype=np.float64)
        for index, y in enumerate(rows):
            for x in range(self._width):
                u, v = rng.random(2)
                ray = self.camera.cast_ray(x, y, self._width, self._height, u, v)
                partial[index, x] = self.sampler.sample(self.scene, ray, rng)
        return partial

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the averaged image as a NumPy array of shape (height, width, 3).

        Args:
            gamma: Gamma correction value. Default 1.0 returns linear,
                unclamped radiance.
        """
        if self._iterations == 0:
            image = np.zeros_like(self._buffer, dtype=np.float32)
        else:
            image = (self._buffer / self._iterations).astype(np.float32)

        if gamma != 1.0:
            image = np.power(np.clip(image, 0.0, 1.0), 1.0 / gamma).astype(np.float32)
        return image

    def get_image_uint8(
        self,
        gamma: float = 2.2,
        tone_map: ToneMapMethod = "none",
        exposure: float = 1.0,
    ) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array."""
        return image_to_uint8(self.get_image_numpy(), tone_map=tone_map, gamma=gamma, exposure=exposure)

    def save_image(
        self,
        filepath: str | Path,
        gamma: float = 2.2,
        tone_map: ToneMapMethod = "none",
        exposure: float = 1.0,
    ) -> None:
        """Save the rendered image to a PNG file."""
        save_png_from_array(
            self.get_image_numpy(),
            filepath,
            tone_map=tone_map,
            gamma=gamma,
            exposure=exposure,
        )
        logger.info("Saved %s after %d samples", filepath, self._iterations)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"samples={self.sample_count}, workers={self.workers})"
        )


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
