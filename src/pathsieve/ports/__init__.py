from .filesystem import DirectoryHandle, FilesystemPort
from .naming import NamingRulesPort

__all__ = ["DirectoryHandle", "FilesystemPort", "NamingRulesPort"]
