from fastapi import Request
from fastapi.responses import JSONResponse

from services.exceptions import FleetDomainError


async def domain_exception_handler(request: Request, exc: FleetDomainError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.__class__.__name__,
            "message": exc.message,
        },
    )
