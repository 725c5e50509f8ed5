"""Sample application package described through reflection in tests."""
