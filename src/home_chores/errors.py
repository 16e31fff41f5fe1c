"""Exception types for Home Chores."""


class HomeChoresError(Exception):
    """Base class for all errors raised by Home Chores."""


class StorageError(HomeChoresError):
    """The database could not be reached or a statement failed."""


class SchemaError(StorageError):
    """The tasks table could not be created or migrated."""


class TaskValidationError(HomeChoresError, ValueError):
    """A task or argument was rejected before anything was written."""


class ExportError(HomeChoresError):
    """Writing an export file failed."""
