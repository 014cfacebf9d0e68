from common.logger import get_logger
from common.rwlock import RWLock

__all__ = ["get_logger", "RWLock"]
