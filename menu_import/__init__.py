"""
Restaurant menu import service.
"""
from importlib import metadata

try:
    __version__ = metadata.version("menu-import-api")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"
