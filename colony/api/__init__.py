"""HTTP inspection and control API."""
