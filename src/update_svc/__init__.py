"""
Extension Update Service - Omaha protocol update server

Answers update checks from component and extension updaters:
- Batch XML update checks (protocol 3.0 requests, 3.1 responses)
- Webstore-style single extension checks
- Upstream redirects for extensions this server doesn't offer
"""

__version__ = "0.1.0"
