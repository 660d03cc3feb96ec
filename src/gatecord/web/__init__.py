"""Keep-alive HTTP server."""
