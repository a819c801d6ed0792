__all__ = ["BootConfiguration", "GraderContainer", "StorageContainer"]

from .grader import BootConfiguration, GraderContainer
from .storage import StorageContainer
