from .sliding_window import SlidingUniqueWindow
from .stats import average, pearson_correlation

__all__ = ["SlidingUniqueWindow", "average", "pearson_correlation"]
