from .config import EmptyClusterPolicy, EngineConfig, KMeansConfig
from .core import (
    CentroidAccumulated,
    Classifier,
    ClosestCentroid,
    KMeansLloyd,
    KMeansModel,
    Point,
    k_means,
)
from .dataflow import Context, Dataset
from .errors import (
    DimensionMismatchError,
    EmptyCentroidsError,
    InsufficientDataError,
    KMeansError,
)

__all__ = [
    "EmptyClusterPolicy",
    "EngineConfig",
    "KMeansConfig",
    "CentroidAccumulated",
    "Classifier",
    "ClosestCentroid",
    "KMeansLloyd",
    "KMeansModel",
    "Point",
    "k_means",
    "Context",
    "Dataset",
    "DimensionMismatchError",
    "EmptyCentroidsError",
    "InsufficientDataError",
    "KMeansError",
]
