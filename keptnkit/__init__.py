"""Client library for the Keptn control plane: models, API handlers and utilities."""

__version__ = "0.1.0"