"""Domain availability endpoint"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from docpage.schemas.domain_schemas import CheckDomainRequest
from docpage.services.domain_service import DomainLookupError, check_domain_availability

router = APIRouter()


@router.post("/check-domain-rdap")
async def check_domain_rdap(body: CheckDomainRequest):
    """
    ## Check whether `<domain>.com.br` is free

    Invalid labels answer **200** with `available: false`. Only a failure to
    reach the registry answers **500**.
    """
    try:
        result = await check_domain_availability(body.domain)
    except DomainLookupError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"available": False, "error": "Error checking domain. Please try again."},
        )
    return result.model_dump(exclude_none=True)
