"""kflap -- Kubernetes resource flapping detector.

Polls every listable resource type in a cluster, tracks each object's
``metadata.resourceVersion`` and ranks objects by how often it changes.
"""

__version__ = "0.1.0"
