"""
Model proxy endpoint: attaches the server-held credential and returns the
vendor's JSON unmodified.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from socrate.api.dependencies import get_proxy
from socrate.api.schemas import ProxyRequest
from socrate.shared.llm import VendorProxy

router = APIRouter(prefix="/api", tags=["proxy"])


@router.post("/gemini")
async def forward_prompt(
    body: ProxyRequest,
    proxy: VendorProxy = Depends(get_proxy),
):
    status_code, data = await proxy.forward(body.prompt, body.model)
    return JSONResponse(content=data, status_code=status_code)
