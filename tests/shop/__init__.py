"""Sample application used by the Starlette integration tests."""
