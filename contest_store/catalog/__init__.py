from .repository import Store
from .schemas import Contest, Problem, Submission

__all__ = ["Contest", "Problem", "Store", "Submission"]
