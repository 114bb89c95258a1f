"""Gradio user interface for NanoArt Studio."""
