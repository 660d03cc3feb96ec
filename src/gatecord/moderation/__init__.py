"""Ban channel and verification workflows, with their parsing, rendering and error types."""
