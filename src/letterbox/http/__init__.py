"""HTTP value types: immutable request, response, headers, and query params."""
