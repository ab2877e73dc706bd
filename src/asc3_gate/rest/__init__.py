"""HTTP surface: app factory, dependencies, routes."""
