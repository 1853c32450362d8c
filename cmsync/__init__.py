"""cmsync — reconcile declared content models with a remote authoritative copy."""

__version__ = "0.1.0"
