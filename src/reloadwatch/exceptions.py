# Custom exceptions for reloadwatch

class ReloadWatchError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigurationError(ReloadWatchError):
    """Raised when a checker is constructed with invalid arguments."""
    pass

class AccessError(ReloadWatchError):
    """Raised when a directory cannot be read while probing it for watching."""
    def __init__(self, path: str, message: str = "directory is not accessible"):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")

class RegistrationError(ReloadWatchError):
    """Raised when the notification backend fails to start watching."""
    def __init__(self, paths: list, cause: Exception = None):
        self.paths = list(paths)
        self.cause = cause
        message = f"Failed to watch {len(self.paths)} path(s)"
        if cause is not None:
            message += f": {type(cause).__name__}: {cause}"
        super().__init__(message)
