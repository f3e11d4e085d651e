"""Errors that make a sweeper skip a region or a single resource.

Sweepers are best effort. The patterns below describe regions or accounts
that cannot be swept for benign reasons: missing endpoints, operations not
available in the partition, blanket access denials.
"""
from typing import Optional

from botocore.exceptions import EndpointConnectionError

from awsprovider.infrastructure.error.predicates import (
    ErrorPattern,
    error_code_contains,
    iter_error_chain,
    matches_any,
)

SKIP_SWEEP_ERROR_PATTERNS = (
    # Missing API endpoints
    ErrorPattern(code="RequestError", message="send request failed"),
    # Unsupported API calls
    ErrorPattern(code="UnsupportedOperation"),
    # InvalidParameterValue: Use of cache security groups is not permitted in this API version for your account.
    ErrorPattern(code="InvalidParameterValue", message="not permitted in this API version for your account"),
    # InvalidParameterValue: Access Denied to API Version: APIGlobalDatabases
    ErrorPattern(code="InvalidParameterValue", message="Access Denied to API Version"),
    # GovCloud endpoints respond with an empty AccessDeniedException
    ErrorPattern(code="AccessDeniedException"),
    # BadRequestException: vpc link not supported for region us-gov-west-1
    ErrorPattern(code="BadRequestException", message="not supported"),
    # InvalidAction: The action DescribeTransitGatewayAttachments is not valid for this web service
    ErrorPattern(code="InvalidAction", message="is not valid"),
    # GovCloud SES.SetActiveReceiptRuleSet
    ErrorPattern(code="InvalidAction", message="Unavailable Operation"),
    # us-west-2 Route53 key signing key
    ErrorPattern(code="InvalidKeySigningKeyStatus", message="cannot be deleted because"),
    # us-west-2 Route53 zone
    ErrorPattern(code="KeySigningKeyInParentDSRecord", message="Due to DNS lookup failure"),
)


def is_skippable_sweep_error(err: Optional[BaseException]) -> bool:
    """True if a sweeper should treat ``err`` as "nothing to sweep here"."""
    if err is None:
        return False
    for candidate in iter_error_chain(err):
        if isinstance(candidate, EndpointConnectionError):
            return True
    return matches_any(err, SKIP_SWEEP_ERROR_PATTERNS)


def is_skippable_resource_error(err: Optional[BaseException]) -> bool:
    """True for resources that cannot be swept individually, e.g. managed by central IT."""
    return error_code_contains(err, "AccessDenied")
