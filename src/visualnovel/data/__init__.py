"""Demo chapters bundled with the package."""
