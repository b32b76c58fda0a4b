"""Kubernetes interaction module."""

from .client import K8sClient
from .discovery import ResourceDiscovery

__all__ = ["K8sClient", "ResourceDiscovery"]
