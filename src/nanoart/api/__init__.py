"""NanoArt Studio FastAPI REST API layer.

This package contains the FastAPI application and its Pydantic request
models.

Modules
-------
main
    FastAPI application with all route handlers, the mounted Gradio UI and
    the ``main()`` CLI entry point.
models
    Pydantic models for API request validation.
"""
