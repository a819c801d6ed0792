__all__ = ["feedback", "grades", "ordering", "peer"]

from . import feedback, grades, ordering, peer
