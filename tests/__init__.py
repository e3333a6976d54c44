"""
Test suite del seguimiento de obras escolares.

Test Categories:
- unit: Fast, isolated tests
- integration: Tests that interact with multiple components

Run tests with:
    pytest                          # Run all tests
    pytest -m unit                  # Run only unit tests
    pytest -m integration           # Run only integration tests
"""
