"""
Procedural voxel avatars.

This package contains:
- models: trait records, avatar geometry and API schemas
- services: trait normalization, geometry assembly, batch generation, glTF export
- api: FastAPI routes
"""
