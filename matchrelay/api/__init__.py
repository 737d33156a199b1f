"""FastAPI surface: wire models, frame codec, dependencies and routes."""
