"""
gamefeed/storage package marker.
"""

from gamefeed.storage.json_sink import JsonFileSink

__all__ = ["JsonFileSink"]
