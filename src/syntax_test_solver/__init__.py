"""
Syntax Test Solver - extract, translate and solve English syntax tests from page images.
"""

__version__ = "0.1.0"

from .pipeline import process_test_images

__all__ = ["process_test_images", "__version__"]
