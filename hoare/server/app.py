#!/usr/bin/env python3
"""
hoare FastAPI Server
Provides a REST API for contract injection
"""
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hoare import __version__
from hoare.core.config import load_settings
from hoare.core.models import RewriteContext
from hoare.core.transformer import rewrite_source
from hoare.logging import get_logger
from hoare.logging_tags import SERVER
from hoare.parser import ContractParser

logger = get_logger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class RewriteRequest(BaseModel):
    source: str
    filename: str = "<request>"
    debug_assertions: Optional[bool] = None
    start_instance: int = 0


class DiagnosticModel(BaseModel):
    kind: str
    message: str
    lineno: int
    col_offset: int
    filename: str


class RewriteResponse(BaseModel):
    success: bool
    source: Optional[str] = None
    rewritten: List[str] = []
    diagnostics: List[DiagnosticModel] = []
    next_instance: Optional[int] = None
    error: Optional[str] = None


class ContractsRequest(BaseModel):
    source: str
    filename: str = "<request>"


class ContractModel(BaseModel):
    keyword: str
    predicate: Optional[str] = None


class DeclarationModel(BaseModel):
    name: str
    qualname: str
    lineno: int
    shape: str
    contracts: List[ContractModel]


class ContractsResponse(BaseModel):
    success: bool
    declarations: List[DeclarationModel] = []
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    debug_assertions: bool


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="hoare API",
    description="Inject Hoare-style contract checks into Python source",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    return {
        "status": "ok",
        "version": __version__,
        "debug_assertions": load_settings().debug_assertions
    }


@app.post("/api/rewrite", response_model=RewriteResponse)
async def rewrite(request: RewriteRequest):
    """
    Rewrite a module, injecting the checks of its contract decorators.

    Example:
        POST /api/rewrite
        {
            "source": "@precond(\\"x > 0\\")\\ndef f(x):\\n    return x\\n",
            "debug_assertions": true
        }

    Contract errors do not fail the request: the affected declarations are
    left as they were and listed in diagnostics, with success false.
    """
    debug_assertions = request.debug_assertions
    if debug_assertions is None:
        debug_assertions = load_settings().debug_assertions
    context = RewriteContext(instance=request.start_instance, debug_assertions=debug_assertions)

    try:
        result = rewrite_source(request.source, request.filename, context=context)
    except SyntaxError as e:
        logger.info(f"{SERVER} rejected {request.filename}: {e}")
        return {
            "success": False,
            "error": f"invalid Python source: {e}"
        }

    return {
        "success": result.ok,
        "source": result.source,
        "rewritten": result.rewritten,
        "diagnostics": [d.to_dict() for d in result.diagnostics],
        "next_instance": result.context.instance
    }


@app.post("/api/contracts", response_model=ContractsResponse)
async def list_contracts(request: ContractsRequest):
    """List the contract-annotated declarations of a module without rewriting it"""
    try:
        declarations = ContractParser().parse_source(request.source, request.filename)
    except SyntaxError as e:
        return {
            "success": False,
            "error": f"invalid Python source: {e}"
        }

    return {
        "success": True,
        "declarations": declarations
    }


# ============================================================================
# Run Server
# ============================================================================

def main():
    import uvicorn
    from dotenv import load_dotenv

    from hoare.logging import configure_logging

    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)

    print("=" * 60)
    print("hoare API Server")
    print("=" * 60)
    print(f"Starting server on http://{settings.host}:{settings.port}")
    print(f"API docs: http://{settings.host}:{settings.port}/docs")
    print("=" * 60)

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
