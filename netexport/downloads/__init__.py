from netexport.downloads.sink import InMemoryDownloadSink, StoredDownload

__all__ = ['InMemoryDownloadSink', 'StoredDownload']
