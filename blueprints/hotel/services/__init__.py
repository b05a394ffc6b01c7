"""Hotel services package."""
