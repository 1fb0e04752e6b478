"""Document storage and org connectivity used by the CLI."""
