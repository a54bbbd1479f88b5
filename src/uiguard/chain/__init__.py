"""Validation chain over complete UI documents."""

from uiguard.chain.components import ComponentValidator, categorize_layer
from uiguard.chain.formatting import ERRORS_HEADER, LAYER_LABELS, format_errors_for_llm
from uiguard.chain.pipeline import (
    ChainConfig,
    ChainResult,
    ValidationChain,
    execute_validation_chain,
    find_excessive_nesting,
    layer_order,
)
from uiguard.chain.structure import Finding, StructureValidator
from uiguard.chain.style import check_style_compliance

__all__ = [
    "ERRORS_HEADER",
    "LAYER_LABELS",
    "ChainConfig",
    "ChainResult",
    "ComponentValidator",
    "Finding",
    "StructureValidator",
    "ValidationChain",
    "categorize_layer",
    "check_style_compliance",
    "execute_validation_chain",
    "find_excessive_nesting",
    "format_errors_for_llm",
    "layer_order",
]
