"""Adapters binding the registry ports to concrete infrastructure."""
