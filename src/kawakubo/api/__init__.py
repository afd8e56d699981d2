"""Kawakubo AI Designer: FastAPI REST API layer.

This package contains the FastAPI application, the Pydantic request/response
models, and the generation request handler.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
handler
    Request validation, provider invocation and error mapping for design
    generation.
"""
