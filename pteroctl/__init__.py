"""
pteroctl - Client and command-line tool for the Pterodactyl application API.

Provides:
- Request option encoding (includes, filters, sorting, pagination)
- Relationship-resolving response decoding into typed entities
- A requests-based API client for users, servers, nodes, locations,
  nests/eggs and server databases
"""

__version__ = "1.2.0"
__prog_name__ = "pteroctl"
__author__ = "pteroctl contributors"
