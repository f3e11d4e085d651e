"""SQS constants."""

FIFO_QUEUE_NAME_SUFFIX = ".fifo"

DEFAULT_QUEUE_DELAY_SECONDS = 0
DEFAULT_QUEUE_KMS_DATA_KEY_REUSE_PERIOD_SECONDS = 300
DEFAULT_QUEUE_MAXIMUM_MESSAGE_SIZE = 262_144
DEFAULT_QUEUE_MESSAGE_RETENTION_PERIOD = 345_600
DEFAULT_QUEUE_RECEIVE_MESSAGE_WAIT_TIME_SECONDS = 0
DEFAULT_QUEUE_VISIBILITY_TIMEOUT = 30

DEDUPLICATION_SCOPE_VALUES = ("messageGroup", "queue")
FIFO_THROUGHPUT_LIMIT_VALUES = ("perMessageGroupId", "perQueue")

ERR_CODE_INVALID_ACTION = "InvalidAction"
ERR_CODE_QUEUE_DELETED_RECENTLY = "AWS.SimpleQueueService.QueueDeletedRecently"
ERR_CODE_QUEUE_DOES_NOT_EXIST = "AWS.SimpleQueueService.NonExistentQueue"
ERR_CODE_UNSUPPORTED_OPERATION = "AWS.SimpleQueueService.UnsupportedOperation"

# Codes newer endpoints (JSON protocol) return for the same conditions.
ERR_CODE_QUEUE_DELETED_RECENTLY_JSON = "QueueDeletedRecently"
ERR_CODE_QUEUE_DOES_NOT_EXIST_JSON = "QueueDoesNotExist"
ERR_CODE_UNSUPPORTED_OPERATION_JSON = "UnsupportedOperation"
