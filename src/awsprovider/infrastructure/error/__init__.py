"""Error classification layer."""

from .multierror import MultiError
from .not_found import (
    NOT_FOUND_ERROR_PATTERNS,
    NotFoundError,
    empty_result_error,
    is_not_found,
    singular_data_source_find_error,
    too_many_results_error,
)
from .predicates import (
    ErrorPattern,
    aws_error_code,
    aws_error_message,
    error_code_contains,
    error_code_equals,
    error_code_in,
    error_message_contains,
    error_status_code_equals,
    find_aws_error,
    iter_error_chain,
    matches_any,
)
from .sweep_errors import (
    SKIP_SWEEP_ERROR_PATTERNS,
    is_skippable_resource_error,
    is_skippable_sweep_error,
)

__all__: list[str] = [
    "ErrorPattern",
    "MultiError",
    "NOT_FOUND_ERROR_PATTERNS",
    "NotFoundError",
    "SKIP_SWEEP_ERROR_PATTERNS",
    "aws_error_code",
    "aws_error_message",
    "empty_result_error",
    "error_code_contains",
    "error_code_equals",
    "error_code_in",
    "error_message_contains",
    "error_status_code_equals",
    "find_aws_error",
    "is_not_found",
    "is_skippable_resource_error",
    "is_skippable_sweep_error",
    "iter_error_chain",
    "matches_any",
    "singular_data_source_find_error",
    "too_many_results_error",
]
