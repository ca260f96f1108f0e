"""
Custom exceptions for SimpleBoot
"""


class SimpleBootException(Exception):
    """Base exception for SimpleBoot"""
    pass


class PreconditionException(SimpleBootException):
    """Exception raised when a request fails its pre-flight checks"""
    pass


class ImageNotFoundException(PreconditionException):
    """Exception raised when the requested image does not exist"""
    pass


class DuplicateMountException(PreconditionException):
    """Exception raised when the requested image is already mounted"""
    pass


class EnvironmentException(SimpleBootException):
    """Exception raised when a kernel facility required by a method is missing"""
    pass


class CommandExecutionException(SimpleBootException):
    """Exception raised when a privileged command batch fails"""
    pass


class StateStoreException(SimpleBootException):
    """Exception raised for mount state persistence errors"""
    pass


class ConfigurationException(SimpleBootException):
    """Exception raised for configuration errors"""
    pass


class LockTimeoutException(SimpleBootException):
    """Exception raised when the operation lock cannot be acquired in time"""
    pass
