"""
Document module for typed access to MongoDB collections.

This module provides functionality for:
- Document classes and the catalog of Document classes an application uses
- Mapping Document classes to collections
- Typed CRUD operations with retries on connectivity faults
"""
