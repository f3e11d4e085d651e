"""NotFound sentinel and the per-service "entity does not exist" table."""
from typing import Any, Optional

from awsprovider.infrastructure.error.predicates import ErrorPattern, iter_error_chain, matches_any
from awsprovider.infrastructure.exceptions import InfrastructureError


class NotFoundError(InfrastructureError):
    """The remote resource definitively does not exist.

    Finders raise this with the SDK error and the request that produced it so
    the caller keeps full diagnostics. Equality with the sentinel is checked
    with :func:`is_not_found`, never by identity.
    """

    def __init__(self, message: Optional[str] = None, last_error: Optional[BaseException] = None,
                 last_request: Any = None, retries: int = 0):
        if message is None:
            if last_error is not None:
                message = str(last_error)
            elif retries:
                message = f"couldn't find resource ({retries} retries)"
            else:
                message = "couldn't find resource"
        super().__init__(message)
        self.last_error = last_error
        self.last_request = last_request
        self.retries = retries


NOT_FOUND_ERROR_PATTERNS = (
    ErrorPattern(code="ResourceNotFoundException"),
    ErrorPattern(code="ResourceNotFound"),
    ErrorPattern(code="NoSuchEntity"),
    ErrorPattern(code="NotFoundException"),
    ErrorPattern(code="AWS.SimpleQueueService.NonExistentQueue"),
    ErrorPattern(code="QueueDoesNotExist"),
    ErrorPattern(code="InvalidPlacementGroup.Unknown"),
    ErrorPattern(code="InvalidInstanceID.NotFound"),
    ErrorPattern(code="StackSetNotFoundException"),
    ErrorPattern(code="StackInstanceNotFoundException"),
    ErrorPattern(code="NoSuchBucket"),
    ErrorPattern(code="ValidationError", message="does not exist"),
)


def is_not_found(err: Optional[BaseException]) -> bool:
    """True for the NotFound sentinel or a known "does not exist" AWS error."""
    if err is None:
        return False
    for candidate in iter_error_chain(err):
        if isinstance(candidate, NotFoundError):
            return True
    return matches_any(err, NOT_FOUND_ERROR_PATTERNS)


def empty_result_error(last_request: Any = None) -> NotFoundError:
    """NotFound for an API call that succeeded but returned nothing."""
    return NotFoundError(message="empty result", last_request=last_request)


def too_many_results_error(count: int, last_request: Any = None) -> InfrastructureError:
    return InfrastructureError(f"too many results: wanted 1, got {count}", details=last_request)


def singular_data_source_find_error(kind: str, err: BaseException) -> InfrastructureError:
    """Diagnostic for data sources that expect exactly one match."""
    if is_not_found(err):
        return InfrastructureError(f"no matching {kind} found")
    return InfrastructureError(f"reading {kind}: {err}")
