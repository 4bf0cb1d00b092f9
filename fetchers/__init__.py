"""HTTP clients for the reviews backend."""
