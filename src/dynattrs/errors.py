"""
Exception hierarchy for dynattrs.

Unknown attribute access is *not* represented here: it surfaces as the
built-in ``AttributeError`` so dynamic handling stays invisible when it
does not apply.
"""


class DynamicAttributesError(Exception):
    """Base class for every error raised by dynattrs."""


class UndefinedTableColumn(DynamicAttributesError):
    """The configured blob column is not a column of the record type."""


class BlobDecodeError(DynamicAttributesError, ValueError):
    """Stored blob text could not be decoded into a mapping."""


class BlobEncodeError(DynamicAttributesError, ValueError):
    """A pending value could not be serialized into the blob."""


class MultiparameterAssignmentError(DynamicAttributesError):
    """One or more multi-parameter attributes failed to assemble."""

    def __init__(self, errors: list[tuple[str, Exception]]):
        self.errors = errors
        names = ", ".join(name for name, _ in errors)
        super().__init__(f"{len(errors)} error(s) on assignment of multiparameter attributes: {names}")


class DeclaredFieldConflict(DynamicAttributesError, ValueError):
    """A declared dynamic field has the same name as a static column."""
