"""
kibctl

A command-line client that imports, lists and exports Kibana dashboards
through the saved-object HTTP API.
"""

__version__ = "0.1.0"
__author__ = "kibctl maintainers"
__description__ = "A cli tool for kibana dashboards"
__license__ = "MIT"

# Version info tuple
VERSION_INFO = tuple(map(int, __version__.split('.')))
