from .file_sequence import FileSequence
from .naming_service import NamingService
from .traversal import TraversalCursor
from .traversal_service import (
    TraversalService,
    depth_predicate,
    extension_predicate,
    iterate_files,
    list_files,
    stream_files,
)


__all__ = [
    'FileSequence',
    'NamingService',
    'TraversalCursor',
    'TraversalService',
    'depth_predicate',
    'extension_predicate',
    'iterate_files',
    'list_files',
    'stream_files',
]
