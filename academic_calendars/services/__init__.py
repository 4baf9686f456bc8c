"""Calendar computations used by the notebook worker (fiscal-year math, data source, descriptions)."""
