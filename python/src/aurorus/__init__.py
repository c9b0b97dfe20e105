"""
aurorus

Package discovery and update service for Arch Linux. Merges AUR search results
with official repository results into one selectable catalog, resolves AUR
build dependencies, and checks installed foreign packages for newer versions.
"""

__version__ = "1.0.0"
