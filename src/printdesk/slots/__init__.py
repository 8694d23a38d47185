"""Pickup slot pool, allocation and admission control."""
