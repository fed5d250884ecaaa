"""
Custom Database Exceptions for the recruiter backend

This module provides custom exception classes for database operations:
- ImmutableRecordError: Raised when an append-only or never-deleted record
  is updated or deleted through the ORM
"""


class ImmutableRecordError(Exception):
    """
    Exception raised when an immutable record is modified.

    Attributes:
        model_label: The ``app_label.ModelName`` of the record.
        operation: The refused operation (``update`` or ``delete``).

    Example:
        try:
            entry.delete()
        except ImmutableRecordError as e:
            logger.warning(e.message)
    """

    def __init__(self, model_label: str = None, operation: str = None, message: str = None):
        self.model_label = model_label
        self.operation = operation

        if message:
            self.message = message
        else:
            self.message = f"{model_label} records cannot be {operation}d."

        super().__init__(self.message)
