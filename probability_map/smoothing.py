# smoothing.py
# ----------------
# Separable smoothing of a log-odds grid.
#
# Exposes:
#   - kernel_length(map_sigma)
#   - recorded_kernel / gaussian_kernel   (1-D tap builders)
#   - KERNELS                             (name -> builder)
#   - build_kernel(sigma, cell_size, kernel)
#   - separable_convolve(cells, kernel_1d)

from __future__ import annotations
from typing import Callable, Union
import logging
import math
import numpy as np

logger = logging.getLogger(__name__)

KernelFn = Callable[[float, float, int], np.ndarray]


# -----------------------------
# Kernel builders
# -----------------------------

def kernel_length(map_sigma: float) -> int:
    """Odd tap count covering +/- 3 sigma (in cells)."""
    return 2 * int(math.floor(3.0 * map_sigma)) + 1


def _offsets(length: int) -> np.ndarray:
    return np.arange(length, dtype=np.float64) - (length - 1) // 2


def recorded_kernel(sigma: float, map_sigma: float, length: int) -> np.ndarray:
    """
    Tap values of the map's historical smoothing formula:
        k(x) = 1 / (sigma * sqrt(2 pi)) * exp(x^2 / sigma^2)
    Normalisation and exponent use the world-unit sigma while the support
    comes from map_sigma. Not a normalised Gaussian; kept as recorded.
    """
    x = _offsets(length)
    with np.errstate(over="ignore"):
        return 1.0 / (sigma * math.sqrt(2.0 * math.pi)) * np.exp((x * x) / (sigma * sigma))


def gaussian_kernel(sigma: float, map_sigma: float, length: int) -> np.ndarray:
    """Unit-sum Gaussian with standard deviation map_sigma (cells)."""
    x = _offsets(length)
    k = np.exp(-(x * x) / (2.0 * map_sigma * map_sigma))
    return k / k.sum()


KERNELS = {
    "recorded": recorded_kernel,
    "gaussian": gaussian_kernel,
}


def build_kernel(
    sigma: float,
    cell_size: float,
    kernel: Union[str, KernelFn] = "recorded",
) -> np.ndarray:
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")

    map_sigma = sigma / cell_size
    length = kernel_length(map_sigma)

    if callable(kernel):
        fn = kernel
    else:
        try:
            fn = KERNELS[kernel]
        except KeyError:
            raise ValueError(
                f"Unknown kernel {kernel!r}; expected one of {sorted(KERNELS)} or a callable."
            ) from None

    taps = np.asarray(fn(sigma, map_sigma, length), dtype=np.float64).ravel()
    if taps.size != length:
        raise ValueError(f"Kernel returned {taps.size} taps, expected {length}.")
    logger.debug("smoothing kernel: sigma=%s map_sigma=%s length=%d", sigma, map_sigma, length)
    return taps


# -----------------------------
# Convolution
# -----------------------------

def _convolve_axis(cells: np.ndarray, kernel_1d: np.ndarray, axis: int) -> np.ndarray:
    """
    Full 1-D convolution along one axis, cropped back to the centred window
    of the original length. Cells beyond the border contribute 0.
    """
    n = cells.shape[axis]
    off = (kernel_1d.size - 1) // 2

    def conv(v):
        return np.convolve(v, kernel_1d, mode="full")[off:off + n]

    return np.apply_along_axis(conv, axis, cells)


def separable_convolve(cells: np.ndarray, kernel_1d: np.ndarray) -> np.ndarray:
    """Rows first, then columns. Output has the input's shape."""
    with np.errstate(over="ignore", invalid="ignore"):
        out = _convolve_axis(cells, kernel_1d, axis=1)
        out = _convolve_axis(out, kernel_1d, axis=0)
    return out
