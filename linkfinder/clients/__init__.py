"""
Clients for the link store the front end talks to.
"""

from linkfinder.clients.link_store import HttpLinkStore, LinkStore

__all__ = ["HttpLinkStore", "LinkStore"]
