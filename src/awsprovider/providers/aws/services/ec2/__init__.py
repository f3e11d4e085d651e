"""Amazon EC2 resources."""

from .placement_group import PLACEMENT_GROUP
from .sweeper import sweep_placement_groups

__all__: list[str] = ["PLACEMENT_GROUP", "sweep_placement_groups"]
