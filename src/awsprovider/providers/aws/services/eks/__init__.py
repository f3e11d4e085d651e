"""Amazon EKS resources."""

from .fargate_profile import FARGATE_PROFILE
from .sweeper import sweep_fargate_profiles

__all__: list[str] = ["FARGATE_PROFILE", "sweep_fargate_profiles"]
