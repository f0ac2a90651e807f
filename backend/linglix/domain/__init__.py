"""Pure domain logic: the availability engine and booking rules."""
