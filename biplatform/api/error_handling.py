"""Error handling utilities for the BI apis"""

from functools import wraps

from ninja.errors import HttpError

from biplatform.core.exceptions import (
    EntityNotFoundError,
    EntityServiceError,
    StoreUnavailableError,
    ValidationFailedError,
)
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform")


def handle_service_errors(func):
    """Decorator mapping service errors to http errors"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HttpError:
            raise
        except EntityNotFoundError as err:
            raise HttpError(404, err.message) from err
        except ValidationFailedError as err:
            raise HttpError(400, err.message) from err
        except StoreUnavailableError as err:
            logger.error(f"store unavailable in {func.__name__}: {err.message}")
            raise HttpError(503, "service temporarily unavailable") from err
        except EntityServiceError as err:
            logger.error(f"unhandled service error in {func.__name__}: {err.message}")
            raise HttpError(500, err.message) from err

    return wrapper


def cascade_response(payload: dict, result) -> dict:
    """attach the failed follow-up steps of a cascade as warnings"""
    return {**payload, "warnings": list(result.errors)}
