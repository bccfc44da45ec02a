"""Resource type discovery for kflap.

Submodules:
    deprecations -- Policy table of superseded-but-still-served resources.
    discoverer   -- Turns the preferred-version catalogue into pollable types.
"""

from kflap.discovery.deprecations import DEFAULT_DEPRECATED_RESOURCES, DeprecationPolicy
from kflap.discovery.discoverer import DiscoveryError, ResourceDiscoverer

__all__ = [
    "DEFAULT_DEPRECATED_RESOURCES",
    "DeprecationPolicy",
    "DiscoveryError",
    "ResourceDiscoverer",
]
