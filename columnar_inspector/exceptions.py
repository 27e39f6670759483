"""Exceptions raised by the columnar inspector"""


class InspectorError(Exception):
    """Base exception for inspector errors"""
    pass


class DescriptorValidationError(InspectorError):
    """Raised when container metadata is inconsistent"""
    pass


class NotFoundError(InspectorError):
    """Raised when a column, field or container cannot be found"""
    pass


class InvalidArgumentError(InspectorError):
    """Raised for unsupported report formats, kinds or types"""
    pass


class PreconditionError(InspectorError):
    """Raised when an inspector is built from a missing or invalid source"""
    pass
