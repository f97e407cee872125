"""Media app package: object storage uploads and time-limited URLs."""
