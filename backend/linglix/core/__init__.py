"""Configuration, constants, enums and domain exceptions."""
