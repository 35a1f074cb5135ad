"""HTTP application for the dynamics backend."""
