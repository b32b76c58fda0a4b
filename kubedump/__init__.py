"""Point-in-time export of Kubernetes cluster state to a browsable directory tree."""

__version__ = "0.1.0"
