"""
Test Suite

Structure:
    tests/
    ├── conftest.py         # Pytest fixtures
    ├── fakes.py            # In-memory repositories
    ├── unit/               # Engine, service and event tests
    └── integration/        # API endpoint tests

To run tests:
    pytest backend/tests/
"""
