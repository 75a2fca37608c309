"""
Static data loading.
"""

from voxelcore.resources.database import Database

__all__ = ["Database"]
