"""
Query Builder

Validates caller criteria and assembles a SearchSpecification.
"""

from typing import FrozenSet, Iterable, Optional, Tuple, Union

from varquery.config import get_log_level
from varquery.query.types import (
    ALL_CRITERIA_BITS,
    MAX_TAG_SPEC_CHARS,
    MAX_TAGSPEC_LEN,
    NAME_CRITERIA,
    Criteria,
    SearchSpecification,
    ValidationCode,
    ValidationError,
)
from varquery.utils import Logger

logger = Logger("varquery-builder", level=get_log_level())

CriteriaInput = Union[int, Iterable[Criteria]]


def criteria_from_mask(mask: int) -> FrozenSet[Criteria]:
    """Convert a legacy OR'd criteria bitmask into a set of kinds."""
    if isinstance(mask, bool) or not isinstance(mask, int):
        raise ValidationError(
            ValidationCode.INVALID_CRITERIA,
            f"Criteria mask must be an integer, got {type(mask).__name__}"
        )
    unknown = mask & ~ALL_CRITERIA_BITS
    if mask < 0 or unknown:
        raise ValidationError(
            ValidationCode.INVALID_CRITERIA,
            f"Unrecognized criteria bits: {hex(unknown if mask >= 0 else mask)}"
        )
    return frozenset(kind for kind in Criteria if mask & kind.bit)


def _normalize_criteria(criteria: Optional[CriteriaInput]) -> FrozenSet[Criteria]:
    if criteria is None:
        return frozenset()
    if isinstance(criteria, int):
        return criteria_from_mask(criteria)
    kinds = []
    for kind in criteria:
        if not isinstance(kind, Criteria):
            raise ValidationError(
                ValidationCode.INVALID_CRITERIA,
                f"Unrecognized criteria kind: {kind!r}"
            )
        kinds.append(kind)
    return frozenset(kinds)


def parse_tags(tag_spec: str) -> Tuple[str, ...]:
    """Split a comma separated tag spec into its non-empty tokens."""
    return tuple(token.strip() for token in tag_spec.split(",") if token.strip())


def _require_unsigned(field_name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(
            ValidationCode.INVALID_VALUE,
            f"{field_name} must be an unsigned integer, got {value!r}"
        )
    return value


def build(
    criteria: Optional[CriteriaInput],
    name_pattern: Optional[str] = None,
    tag_spec: Optional[str] = None,
    instance_id: int = 0,
    flags_mask: int = 0,
) -> SearchSpecification:
    """
    Build a search specification.

    Args:
        criteria: Enabled criteria kinds, or a legacy integer bitmask
        name_pattern: Regex or exact name, used with NAME_REGEX / NAME_EXACT
        tag_spec: Comma separated tags, used with TAGS_MATCH
        instance_id: Owning instance to match, used with INSTANCE_ID_MATCH
        flags_mask: Flag bits to match, used with FLAGS_MATCH

    Returns:
        An immutable SearchSpecification

    Raises:
        ValidationError: unrecognized or conflicting criteria, negative ids

    A tag spec too long for the server's buffer is dropped rather than
    rejected. The search then runs without a tag filter and the returned
    specification has tag_filter_applied set to False.
    """
    kinds = _normalize_criteria(criteria)

    if NAME_CRITERIA <= kinds:
        raise ValidationError(
            ValidationCode.CONFLICTING_CRITERIA,
            "NAME_REGEX and NAME_EXACT cannot be combined"
        )

    instance_id = _require_unsigned("instance_id", instance_id)
    flags_mask = _require_unsigned("flags_mask", flags_mask)

    kept_spec = None
    tags: Tuple[str, ...] = ()
    tag_filter_applied = True
    if tag_spec:
        if len(tag_spec) < MAX_TAGSPEC_LEN:
            kept_spec = tag_spec
            tags = parse_tags(tag_spec)
        elif Criteria.TAGS_MATCH in kinds:
            tag_filter_applied = False
            logger.warning(
                f"Tag spec of {len(tag_spec)} characters exceeds the "
                f"{MAX_TAG_SPEC_CHARS} character limit, searching without a tag filter"
            )

    return SearchSpecification(
        criteria=kinds,
        name_pattern=name_pattern,
        tag_spec=kept_spec,
        tags=tags,
        flags_mask=flags_mask,
        instance_id=instance_id,
        tag_filter_applied=tag_filter_applied,
    )
