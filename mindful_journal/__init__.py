"""Mindful Journal: personal journal with AI reflections, backed by Supabase."""

__version__ = "1.0.0"
