from .document import InMemoryDocumentSink, InsertOneResult, JSONLinesDocumentSink

__all__ = ['InMemoryDocumentSink', 'InsertOneResult', 'JSONLinesDocumentSink']
