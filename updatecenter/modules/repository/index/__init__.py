from .remote_index import DocumentLoader, IndexState, RemoteIndex

__all__ = ["DocumentLoader", "IndexState", "RemoteIndex"]
