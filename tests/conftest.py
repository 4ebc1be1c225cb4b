"""
Shared fixtures: image factories writing into pytest's tmp_path.
"""

import logging
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def solid_image():
    """Factory writing a single-colour image of the given size"""
    def _make(path: Path, size=(64, 64), color=(120, 60, 200), **save_kwargs) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = 'L' if isinstance(color, int) else 'RGB'
        Image.new(mode, size, color).save(path, **save_kwargs)
        return path
    return _make


@pytest.fixture
def noise_array():
    """Factory for reproducible random RGB pixel arrays"""
    def _make(width=96, height=72, seed=0) -> np.ndarray:
        rng = np.random.default_rng(seed)
        return rng.integers(0, 256, (height, width, 3), dtype=np.uint8)
    return _make


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was after code that reconfigures it"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
