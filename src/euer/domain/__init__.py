"""Domain layer: catalog, classification store, suggestion pipeline and report."""
