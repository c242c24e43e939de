"""Exceptions raised by the snapshot repository."""


class ValidationError(ValueError):
    """Raised when a read method receives an invalid argument."""

    pass


def validate_prototype_id(prototype_id: object) -> int:
    """Require a positive integer id (bools are rejected)."""
    if isinstance(prototype_id, bool) or not isinstance(prototype_id, int):
        raise ValidationError(
            f"prototype_id must be an integer, got {type(prototype_id).__name__}"
        )
    if prototype_id <= 0:
        raise ValidationError(f"prototype_id must be positive, got {prototype_id}")
    return prototype_id


def validate_sample_size(size: object) -> int:
    """Require an integer sample size; zero and negatives are allowed."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise ValidationError(f"size must be an integer, got {type(size).__name__}")
    return size
