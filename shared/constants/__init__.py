from .statistics import Statistics, Units

__all__ = ["Statistics", "Units"]
