"""Application layer: harness services. Depends on domain and infrastructure."""
