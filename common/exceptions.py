"""Custom exception classes shared by the API server and the worker."""


class FilesManagerError(Exception):
    """
    Base exception class for all files-manager errors.
    """
    pass


class ValidationError(FilesManagerError):
    """
    Raised when a request is missing a field or carries an invalid value.
    """
    pass


class UnauthorizedError(FilesManagerError):
    """
    Raised when credentials or a session token cannot be verified.
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFoundError(FilesManagerError):
    """
    Raised when a file does not exist, is not owned by the caller,
    or is not visible to the caller.
    """

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class BadRequestError(FilesManagerError):
    """
    Raised when an operation makes no sense for the target, such as
    reading the content of a folder.
    """
    pass


class StoreUnavailableError(FilesManagerError):
    """
    Raised when Redis or MongoDB cannot be reached or rejects a command.
    """
    pass


class JobError(FilesManagerError):
    """
    Raised by the thumbnail worker when a job cannot be processed.
    The job is marked failed and never retried by the worker itself.
    """
    pass
