"""Prometheus collectors for service operations."""
