"""Infrastructure layer: provider probes, configuration and observability."""
