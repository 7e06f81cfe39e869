"""
Study Analytics Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures (reference instant, session/profile factories)
    └── unit/                # One module per analytics service, plus the API and config

Running Tests:
    # Run all tests
    pytest backend/tests/ -v

    # Run a single service's tests
    pytest backend/tests/unit/test_risks.py -v

    # Run with coverage
    pytest backend/tests/ --cov=app --cov-report=html
"""
