"""
Test suite for the certified farm registry.

Test Organization:
- integration/ - service lifecycle and HTTP API tests
- Unit tests for policies and the history log live in registry/
"""
