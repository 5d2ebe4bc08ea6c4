"""Infrastructure: store adapters and the connection factory."""
