from .local_fs import LocalDirectoryHandle, LocalFS

__all__ = ["LocalDirectoryHandle", "LocalFS"]
