"""Whole-document validation and catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from uiguard.api.deps import get_chain
from uiguard.api.schemas import CatalogResponse, ValidateRequest, ValidateResponse
from uiguard.chain.pipeline import ChainConfig, ValidationChain

router = APIRouter()


@router.post("/validate", response_model=ValidateResponse)
async def validate_document(
    body: ValidateRequest,
    chain: ValidationChain = Depends(get_chain),  # noqa: B008
) -> ValidateResponse:
    """Run the validation chain over a complete JSON document."""
    config = ChainConfig(
        validate_style_compliance=body.validate_style_compliance,
        validate_token_usage_compliance=body.validate_token_usage_compliance,
        validate_icon_compliance=body.validate_icon_compliance,
        strict=body.strict,
    )
    result = chain.execute(body.content, config)
    return ValidateResponse(
        valid=result.valid,
        errors=result.errors,
        warnings=result.warnings,
        timing=result.timing,
        schema=result.schema,
    )


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog(
    chain: ValidationChain = Depends(get_chain),  # noqa: B008
) -> CatalogResponse:
    """List the component types the validators accept."""
    catalog = chain.catalog
    aliases = getattr(catalog, "aliases", {})
    return CatalogResponse(components=catalog.get_all(), aliases=aliases)
