"""Time helpers shared by the domain and persistence layers."""
