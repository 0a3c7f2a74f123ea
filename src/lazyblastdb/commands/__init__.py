"""Sub-commands for the lazyblastdb CLI."""
