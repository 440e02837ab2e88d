class LdaError(Exception):
    """Base class of every error raised by gibbslda."""


class InvalidConfig(LdaError, ValueError):
    """ A training or prediction option is out of range or has the wrong shape.

    Raised before any sampling starts.
    """


class InvalidInput(LdaError, ValueError):
    """ The count matrix has negative or non-integer entries, or an empty row/column.
    """


class ModelStateError(LdaError, RuntimeError):
    """ An operation was requested in a state that does not allow it,
    e.g. fitting an estimator twice or predicting before training.
    """


class EmptyIntersection(UserWarning):
    """ A document to be predicted shares no vocabulary with the trained model.

    Issued as a warning; the affected rows receive a degenerate distribution
    and the rest of the batch is processed normally.
    """


class DiagnosticsWarning(UserWarning):
    """ A diagnostic could not be computed and was replaced with NaN."""


class CancelledWarning(UserWarning):
    """ Sampling stopped early at a sweep boundary."""
