"""Bookgraph - GraphQL API over an in-memory catalogue of books and authors."""

__version__ = "1.0.0"
