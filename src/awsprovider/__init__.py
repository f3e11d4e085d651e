"""AWS Provider Core - Root Package.

This package provides the shared runtime of an infrastructure-as-code provider
for AWS: the machinery every resource kind relies on to reconcile a desired
state description with live AWS resources through boto3.

Key Components:
    - config: Provider, logging and sweeper configuration
    - domain: Resource descriptors, state accessors, identifiers and tags
    - infrastructure: Error classification, retry/waiter engine, locking,
      logging and the lifecycle dispatch runtime
    - providers: AWS client, finders, waiters, resource kinds and sweepers
    - cli: Command line entry point (sweepers)

Architecture:
    Resource kinds are declared as descriptors at import time and registered
    in the resource registry. The host drives lifecycle calls through
    ResourceProvider, which wraps every handler invocation with timeouts,
    cancellation and error context.
"""

from ._version import __version__

PACKAGE_NAME = "aws-provider-core"

__package_name__ = PACKAGE_NAME
