"""Core engine components: configuration, results, exceptions, scalar model."""
