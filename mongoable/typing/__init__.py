"""
Typing Module

This module provides the BsonableDataclass machinery which describes the fields of every
Document: their declared types, their declared constraints, and how they are converted to and
from the bson dicts exchanged with the MongoDB driver.
"""

from .bsonable_dataclass.bsonable_dataclass import BsonableDataclass
from .fields.field_schema import FieldSchema
from .fields.schema_config import SchemaConfig
from .registration.type_expectation import TypeExpectation, TypeInfo
from .serialization.obj_to_bson import obj_to_bson
from .serialization.bson_to_type_expectation import bson_to_type_expectation
