"""
Data models for traits and avatar geometry.
"""

from .geometry import AvatarModel, MaterialPalette, Part
from .traits import RawAttribute, TraitRecord

__all__ = ["AvatarModel", "MaterialPalette", "Part", "RawAttribute", "TraitRecord"]
