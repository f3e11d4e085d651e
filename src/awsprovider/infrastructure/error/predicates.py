"""Predicates over structured AWS errors.

Every predicate walks a possibly wrapped error chain (``__cause__``,
``__context__`` and the ``last_error`` attribute carried by the NotFound
sentinel and the timeout errors) looking for a botocore ``ClientError``.
Codes compare exactly, messages by case-sensitive substring. Predicates never
raise and return False for ``None``.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from botocore.exceptions import ClientError


def iter_error_chain(err: Optional[BaseException]) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, each at most once."""
    seen = set()
    pending = [err]
    while pending:
        current = pending.pop(0)
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        last_error = getattr(current, "last_error", None)
        if isinstance(last_error, BaseException):
            pending.append(last_error)
        pending.append(current.__cause__)
        if not current.__suppress_context__:
            pending.append(current.__context__)


def find_aws_error(err: Optional[BaseException]) -> Optional[ClientError]:
    """Return the first ClientError found in the chain, if any."""
    for candidate in iter_error_chain(err):
        if isinstance(candidate, ClientError):
            return candidate
    return None


def aws_error_code(err: Optional[BaseException]) -> Optional[str]:
    aws_err = find_aws_error(err)
    if aws_err is None:
        return None
    return aws_err.response.get("Error", {}).get("Code", "")


def aws_error_message(err: Optional[BaseException]) -> Optional[str]:
    aws_err = find_aws_error(err)
    if aws_err is None:
        return None
    return aws_err.response.get("Error", {}).get("Message", "") or ""


def aws_error_status_code(err: Optional[BaseException]) -> Optional[int]:
    aws_err = find_aws_error(err)
    if aws_err is None:
        return None
    return aws_err.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def error_code_equals(err: Optional[BaseException], code: str) -> bool:
    """True if the wrapped AWS error has exactly this code."""
    return aws_error_code(err) == code


def error_code_in(err: Optional[BaseException], *codes: str) -> bool:
    """True if the wrapped AWS error code is any of ``codes``."""
    code = aws_error_code(err)
    return code is not None and code in codes


def error_code_contains(err: Optional[BaseException], fragment: str) -> bool:
    """True if the wrapped AWS error code contains ``fragment``."""
    code = aws_error_code(err)
    return code is not None and fragment in code


def error_message_contains(err: Optional[BaseException], code: str, substring: str) -> bool:
    """True if the AWS error has this code and its message contains ``substring``."""
    aws_err = find_aws_error(err)
    if aws_err is None:
        return False
    error = aws_err.response.get("Error", {})
    if error.get("Code", "") != code:
        return False
    return substring in (error.get("Message", "") or "")


def error_status_code_equals(err: Optional[BaseException], status: int) -> bool:
    return aws_error_status_code(err) == status


@dataclass(frozen=True)
class ErrorPattern:
    """Matches an error when every specified component matches."""

    code: Optional[str] = None
    message: Optional[str] = None
    status: Optional[int] = None

    def matches(self, err: Optional[BaseException]) -> bool:
        aws_err = find_aws_error(err)
        if aws_err is None:
            return False
        error = aws_err.response.get("Error", {})
        if self.code is not None and error.get("Code", "") != self.code:
            return False
        if self.message is not None and self.message not in (error.get("Message", "") or ""):
            return False
        if self.status is not None:
            status = aws_err.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if status != self.status:
                return False
        return True


def matches_any(err: Optional[BaseException], patterns: Iterable[ErrorPattern]) -> bool:
    return any(pattern.matches(err) for pattern in patterns)
