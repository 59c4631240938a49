"""Exception taxonomy for the preview pipeline."""


class PreviewError(Exception):
    """Base class for every error raised by the preview pipeline."""

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class SchemaError(PreviewError):
    """Footer metadata is missing, corrupt, or declares no columns."""

    def __init__(self, message, path=None):
        self.path = path
        super().__init__(message)


class RowDecodeError(PreviewError):
    """A row group could not be decoded while sampling."""

    def __init__(self, row_group_index, cause):
        self.row_group_index = row_group_index
        self.cause = cause
        super().__init__(f"Failed to decode row group {row_group_index}: {cause}")


class ShapeError(PreviewError):
    """A row does not have one cell per schema column."""

    def __init__(self, row_index, expected, actual):
        self.row_index = row_index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Row {row_index} has {actual} cells but the schema has {expected} columns"
        )
