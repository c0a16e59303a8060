from .context import Context
from .dataset import Dataset

__all__ = ["Context", "Dataset"]
