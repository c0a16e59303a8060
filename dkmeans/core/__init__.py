from .point import Point
from .accumulator import CentroidAccumulated, ClosestCentroid
from .classifier import Classifier, classify, compute_cost
from .model import KMeansModel
from .lloyd import KMeansLloyd, k_means

__all__ = [
    "Point",
    "CentroidAccumulated",
    "ClosestCentroid",
    "Classifier",
    "classify",
    "compute_cost",
    "KMeansModel",
    "KMeansLloyd",
    "k_means",
]
