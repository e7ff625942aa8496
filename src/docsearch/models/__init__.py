"""Data models — documents, query descriptors, and search responses."""
