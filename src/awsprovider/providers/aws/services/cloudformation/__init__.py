"""AWS CloudFormation resources."""

from .stack_set_instance import STACK_SET_INSTANCE
from .sweeper import sweep_stack_set_instances

__all__: list[str] = ["STACK_SET_INSTANCE", "sweep_stack_set_instances"]
