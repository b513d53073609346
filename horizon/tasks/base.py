"""Shared plumbing for model tasks."""

from typing import TYPE_CHECKING, Type

from common.logging_config import get_logger
from horizon.events import ErrorOccurred
from horizon.exceptions import HorizonError

if TYPE_CHECKING:
    from horizon.model import Model

logger = get_logger(__name__)


class ModelTask:
    """
    Base class for one public operation of the model.

    Subclasses set `error_type` to the error family their operation
    reports; errors outside the taxonomy are wrapped into its UNKNOWN case.
    """

    error_type: Type[HorizonError] = HorizonError

    def __init__(self, model: "Model"):
        self.model = model

    def report(self, error: Exception) -> HorizonError:
        """
        Classify an error at the operation boundary, log it and emit it.

        Args:
            error: Error raised while running the operation

        Returns:
            The classified error, ready to be raised
        """
        if isinstance(error, HorizonError):
            horizon_error = error
        else:
            horizon_error = self.error_type.unknown(error)

        logger.error(f"{type(self).__name__} failed: {horizon_error}")
        self.model.emit(ErrorOccurred(horizon_error))
        return horizon_error
