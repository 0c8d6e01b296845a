"""Error taxonomy shared by the repositories, services and controllers."""


class QASystemError(Exception):
    """Base class for every error raised on purpose by the service."""


class NotFoundError(QASystemError):
    """A survey or question referenced by the caller does not exist."""


class StoreError(QASystemError):
    """Any persistence failure: connection, decode, write conflict."""


class StoreConflictError(StoreError):
    """A conditional write matched nothing because another writer got there first."""


class ValidationError(QASystemError):
    """Malformed input rejected before the engine runs."""


class QuestionCountMismatchError(ValidationError):
    pass


class SurveyNotOpenError(ValidationError):
    pass


class SurveyTimeError(ValidationError):
    pass


class RequiredAnswerError(ValidationError):
    pass


class OptionCountError(ValidationError):
    pass


class SurveyTypeError(ValidationError):
    pass


class DuplicateAnswerError(ValidationError):
    pass
