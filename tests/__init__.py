"""
Test suite for bookgraph.

- conftest.py: shared fixtures (store, bus, app, client)
- test_storage.py / test_events.py / test_resolvers.py: building blocks
- test_schema.py: strawberry schema executed directly
- test_api.py: HTTP and websocket transport through FastAPI
"""
