"""Core building blocks shared across datamapper."""
