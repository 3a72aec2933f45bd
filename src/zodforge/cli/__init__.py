"""Command line interface for zodforge."""
