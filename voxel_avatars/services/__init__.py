"""
Trait normalization and avatar assembly services.
"""

from .assembler import AvatarAssemblyError, MissingOrInvalidTrait, assemble
from .batch import build_avatar, generate_avatars
from .normalizer import normalize, normalize_metadata

__all__ = [
    "AvatarAssemblyError",
    "MissingOrInvalidTrait",
    "assemble",
    "build_avatar",
    "generate_avatars",
    "normalize",
    "normalize_metadata",
]
