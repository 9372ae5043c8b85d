"""Inkpost blog publishing backend."""
