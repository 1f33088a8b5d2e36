class ExtractionError(Exception):
    """Base class for every failure raised while extracting EPUB metadata."""

    def __init__(self, message: str, *, cause: Exception = None):
        super().__init__(message)
        self.__cause__ = cause  # Optional chaining for debugging


class ExtractionFailedError(ExtractionError):
    """Raised when extraction fails for a reason not covered by a narrower error."""


class ExtractionFileNotFoundError(ExtractionError):
    """Raised when the container or package document does not exist."""

    def __init__(self, file_path: str, message: str = None, *, cause: Exception = None):
        self.file_path = file_path
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, cause=cause)


class ExtractionParseError(ExtractionError):
    """Raised when a container or package document is not well-formed XML."""

    def __init__(self, file_path: str, message: str = None, *, cause: Exception = None):
        self.file_path = file_path
        if message is None:
            message = f"Malformed XML in {file_path}"
            if cause is not None:
                message = f"{message}: {cause}"
        super().__init__(message, cause=cause)


class ExtractionStructureError(ExtractionError):
    """Raised when the package document lacks a required element (manifest, spine)."""

    def __init__(self, element: str, file_path: str = None):
        self.element = element
        self.file_path = file_path
        message = f"Package document has no <{element}> element"
        if file_path:
            message += f" [{file_path}]"
        super().__init__(message)


class ExtractionDocumentTooLargeError(ExtractionError):
    """Raised when an XML document exceeds the configured size limit."""
