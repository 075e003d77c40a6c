"""
Schema module for generating MongoDB collection validators from Document classes.
"""

from .collection_name import get_collection_name
from .schema_synthesizer import SchemaSynthesizer
from .synthesis_result import SchemaSynthesisResult
from .validator_document import ValidatorDocument
