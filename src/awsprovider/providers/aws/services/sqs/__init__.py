"""Amazon SQS resources."""

from .queue import QUEUE, queue_name_from_url
from .sweeper import sweep_queues

__all__: list[str] = ["QUEUE", "queue_name_from_url", "sweep_queues"]
