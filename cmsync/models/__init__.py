"""Content model representations.

Two shapes of the same entity live here:
- Desired state: what a user declares (``content_model``, ``validation``)
- Remote state: what the authoritative system stores (``remote``, ``validation``)
"""
