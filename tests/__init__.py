"""Test suite for drivekit.

Tests mirror the source layout: backends/, internals/, pipelines/, processing/,
plus top-level modules for the CLI, orchestrator, and entry point.

Running Tests:
    pytest                                  # Run all tests
    pytest -v                               # Verbose output
    pytest tests/test_cli.py                # Run specific file
    pytest -k "images_to_deck"              # Run tests with matching pattern in function name

Debugging Tests:
    - Use breakpoint() in test code, then run with pytest -s
    - Use pytest --pdb to drop into debugger on failure

Notes:
    - Every test runs against a throwaway DRIVEKIT_HOME (see conftest.py)
    - Google API clients are never contacted; tests hand MagicMock services to the backends
    - Fakes for the collaborator protocols live in tests/helpers.py
"""
