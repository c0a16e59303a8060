from .io import read_points, write_points
from .synthetic import SyntheticDataset, make_dataset

__all__ = ["read_points", "write_points", "SyntheticDataset", "make_dataset"]
