"""docsearch Python SDK — Client library for the docsearch API.

Quick start::

    from docsearch.client import DocSearchClient

    client = DocSearchClient("http://localhost:3000")
    page = client.search("pdf", sort="date", order="asc", limit=10)
    for item in page["items"]:
        print(item["slug"])
"""

from docsearch.client.client import AsyncDocSearchClient, DocSearchClient

__all__ = ["AsyncDocSearchClient", "DocSearchClient"]
