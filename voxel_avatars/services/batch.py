"""
Batch avatar generation.

Runs normalization and assembly for many avatars. Each item is independent:
an invalid item is logged and reported as skipped, the rest of the batch is
unaffected.
"""

from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from loguru import logger
from pydantic import BaseModel

from voxel_avatars.models.geometry import AvatarModel
from voxel_avatars.models.schemas import BatchResult, GeneratedAvatar, SkippedAvatar
from voxel_avatars.models.traits import RawAttribute, TraitRecord
from voxel_avatars.services.assembler import BLACK, MissingOrInvalidTrait, assemble
from voxel_avatars.services.normalizer import normalize, normalize_metadata

# A trait record, a metadata document, or a sequence of raw attributes
BatchItem = TraitRecord | BaseModel | Mapping[str, Any] | Sequence[RawAttribute | Mapping[str, Any]]


def build_avatar(
    attributes: Iterable[RawAttribute | Mapping[str, Any]],
    *,
    eye_color: tuple[float, float, float] = BLACK,
) -> AvatarModel:
    """Normalize raw attributes and assemble the resulting record."""
    return assemble(normalize(attributes), eye_color=eye_color)


def to_trait_record(item: BatchItem) -> TraitRecord:
    """Normalize any supported batch item into a trait record."""
    if isinstance(item, TraitRecord):
        return item
    if isinstance(item, (BaseModel, Mapping)):
        return normalize_metadata(item)
    if isinstance(item, (str, bytes)) or not isinstance(item, Iterable):
        logger.warning(f"Unsupported batch item of type {type(item).__name__}, ignoring")
        return TraitRecord()
    return normalize(item)


def generate_avatars(
    items: Iterable[BatchItem],
    *,
    eye_color: tuple[float, float, float] = BLACK,
    max_workers: int = 1,
) -> BatchResult:
    """
    Generate avatars for a batch of items.

    Args:
        items: Trait records, metadata documents or raw attribute sequences
        eye_color: RGB color of the eye material
        max_workers: Thread pool size; 1 runs sequentially

    Returns:
        BatchResult with assembled avatars and skipped items, both in input order
    """
    items = list(items)
    logger.info(f"Generating {len(items)} avatars (workers={max_workers})")

    def run(indexed: tuple[int, BatchItem]) -> GeneratedAvatar | SkippedAvatar:
        index, item = indexed
        return _generate_one(index, item, eye_color)

    if max_workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(run, enumerate(items)))
    else:
        outcomes = [run(indexed) for indexed in enumerate(items)]

    result = BatchResult(
        avatars=[outcome for outcome in outcomes if isinstance(outcome, GeneratedAvatar)],
        skipped=[outcome for outcome in outcomes if isinstance(outcome, SkippedAvatar)],
    )
    logger.info(f"Generated {len(result.avatars)} avatars, skipped {len(result.skipped)}")
    return result


def _generate_one(
    index: int,
    item: BatchItem,
    eye_color: tuple[float, float, float],
) -> GeneratedAvatar | SkippedAvatar:
    try:
        traits = to_trait_record(item)
    except Exception as e:
        logger.error(f"Failed to normalize item {index}: {e}")
        return SkippedAvatar(index=index, field=None, message=f"Failed to normalize item: {e}")

    try:
        avatar = assemble(traits, eye_color=eye_color)
    except MissingOrInvalidTrait as e:
        logger.error(f"Invalid or missing trait '{e.field}' in item {index}: {traits.model_dump()}")
        return SkippedAvatar(index=index, field=e.field, message=str(e))
    return GeneratedAvatar(index=index, avatar=avatar)
