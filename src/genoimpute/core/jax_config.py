"""JAX configuration utilities for genoimpute.

JAX is used for the pairwise mismatch counting behind the Hamming distance
matrix. Counts are accumulated in floating point and rounded back to
integers, so 64-bit precision is enabled to keep them exact for large
panels. ``ensure_jax_configured()`` is called by every JAX entry point and
is a no-op after the first call.
"""

from __future__ import annotations

from typing import Any

import jax
from loguru import logger

_configured = False


def configure_jax(enable_x64: bool = True) -> None:
    """Configure JAX for genoimpute computations.

    Args:
        enable_x64: Enable 64-bit floating point precision. Defaults to True.

    Example:
        >>> configure_jax()  # Enable x64
    """
    global _configured

    if enable_x64:
        jax.config.update("jax_enable_x64", True)
        logger.debug("JAX 64-bit precision enabled")

    _configured = True

    info = get_jax_info()
    logger.debug(
        f"JAX configured: version={info['version']}, "
        f"backend={info['backend']}, devices={len(info['devices'])}"
    )


def ensure_jax_configured() -> None:
    """Apply the default JAX configuration once per process."""
    if not _configured:
        configure_jax()


def get_jax_info() -> dict[str, Any]:
    """Get information about the current JAX configuration.

    Returns:
        Dictionary with keys:
            - version: JAX version string
            - backend: Current default backend name (cpu/gpu/tpu)
            - devices: List of available device descriptions
            - x64_enabled: Whether 64-bit precision is enabled
    """
    return {
        "version": jax.__version__,
        "backend": jax.default_backend(),
        "devices": [str(d) for d in jax.devices()],
        "x64_enabled": bool(jax.config.jax_enable_x64),
    }
