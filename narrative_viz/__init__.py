"""Three-scene narrative visualization of a daily epidemiological time series."""

__version__ = "0.1.0"
