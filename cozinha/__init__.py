# cozinha/__init__.py
"""Agregador de receitas: banco local, TheMealDB e Gemini."""
