# exceptions raised by the session, chat log and analyzer service


class FileAnalyzerError(Exception):
    """Base class for all file analyzer errors"""


# every rejection that should reach the caller as a 400
class ValidationError(FileAnalyzerError):
    """Request rejected because a precondition does not hold"""


class UnsupportedTypeError(ValidationError):
    pass


class EmptyInputError(ValidationError):
    pass


class DocumentExtractionError(ValidationError):
    pass


class NoDocumentError(ValidationError):
    pass


class TopicNotSearchedError(ValidationError):
    pass


class EmptyLogError(ValidationError):
    pass


# lookup failures
class NotFoundError(FileAnalyzerError, KeyError):
    """Topic is not present in the chat log"""

    def __str__(self):
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class SessionNotFoundError(FileAnalyzerError):
    pass
