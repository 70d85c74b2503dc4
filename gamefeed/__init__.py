"""
gamefeed package marker.
"""
