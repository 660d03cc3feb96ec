"""Discord-facing layer: cogs that connect gateway events to the workflows."""
