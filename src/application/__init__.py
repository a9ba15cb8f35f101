"""Application services orchestrating the sampling domain with host adapters."""
