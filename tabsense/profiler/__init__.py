"""Column profiling: type inference, frequencies, statistics, outliers."""
