from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional, Dict, Any, List
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

from schemas.process_model import SchemaVariant
from services.errors import NotationError
from services.sample_processes import SampleProcessesService
from services.visualizer import visualize, extract_process, describe_error
from translators.graph_translator import GraphTranslator
from translators.layout_engine import (
    LayeredLayoutEngine, DEFAULT_SPACING_X, DEFAULT_ROW_HEIGHT, DEFAULT_AXIS_X, DEFAULT_ORIGIN_Y
)

# Layout configuration
layout_defaults = {
    "spacing_x": float(os.getenv("LAYOUT_SPACING_X", DEFAULT_SPACING_X)),
    "row_height": float(os.getenv("LAYOUT_ROW_HEIGHT", DEFAULT_ROW_HEIGHT)),
    "axis_x": float(os.getenv("LAYOUT_AXIS_X", DEFAULT_AXIS_X)),
    "origin_y": float(os.getenv("LAYOUT_ORIGIN_Y", DEFAULT_ORIGIN_Y)),
}

# Initialize services
sample_processes_service = SampleProcessesService()
layout_engine = LayeredLayoutEngine(**layout_defaults)
graph_translator = GraphTranslator(layout_engine)

app = FastAPI(
    title="Process Notation Visualizer",
    version="1.0.0",
)

# Configure CORS - Simplified for local use
allowed_origins = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:5174,http://localhost:3000,http://localhost:8000",
    ).split(",")
    if origin.strip()
]

logger.info(f"CORS enabled for origins: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

# Add validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": f"Validation error: {exc.errors()}"})


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_layout_engine(spacing_x: Optional[float], row_height: Optional[float]) -> LayeredLayoutEngine:
    """Use the configured engine unless the request overrides the spacing."""
    if spacing_x is None and row_height is None:
        return layout_engine
    options = dict(layout_defaults)
    if spacing_x is not None:
        options["spacing_x"] = spacing_x
    if row_height is not None:
        options["row_height"] = row_height
    return LayeredLayoutEngine(**options)

def require_text(text: str) -> str:
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="Process document is empty")
    return text


# ============================================================================
# CORE VISUALIZATION ENDPOINTS
# ============================================================================

class VisualizeRequest(BaseModel):
    text: str
    spacingX: Optional[float] = None
    rowHeight: Optional[float] = None

class ParseRequest(BaseModel):
    text: str

@app.get("/")
async def root():
    return {"message": "Process Notation Visualizer API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.post("/api/visualize")
async def visualize_process(request: VisualizeRequest):
    """Parse a process document and return its positioned graph"""
    text = require_text(request.text)
    logger.info(f"Visualizing process document ({len(text)} characters)")
    try:
        engine = get_layout_engine(request.spacingX, request.rowHeight)
        result = visualize(text, engine)
    except NotationError as e:
        logger.warning(f"Rejected process document: {e.kind}: {e.message}")
        raise HTTPException(status_code=422, detail=describe_error(e))

    return graph_translator.translate(result.graph, result.model)

@app.post("/api/parse")
async def parse_process(request: ParseRequest):
    """Return the canonical process model without layout"""
    text = require_text(request.text)
    try:
        model = extract_process(text)
    except NotationError as e:
        logger.warning(f"Rejected process document: {e.kind}: {e.message}")
        raise HTTPException(status_code=422, detail=describe_error(e))

    return model.model_dump(mode="json")


# ============================================================================
# SAMPLE PROCESS ENDPOINTS
# ============================================================================

@app.get("/api/samples", response_model=List[Dict[str, Any]])
async def list_samples(format: Optional[SchemaVariant] = None):
    """List bundled sample process documents, optionally only one schema variant"""
    if format:
        samples = sample_processes_service.get_samples_by_format(format)
    else:
        samples = sample_processes_service.list_samples()
    return [
        {"id": s.id, "name": s.name, "description": s.description, "format": s.format.value}
        for s in samples
    ]

@app.get("/api/samples/{sample_id}")
async def get_sample(sample_id: str):
    """Get one sample process document including its text"""
    sample = sample_processes_service.get_sample(sample_id)
    if not sample:
        raise HTTPException(status_code=404, detail=f"Sample '{sample_id}' not found")
    return {
        "id": sample.id,
        "name": sample.name,
        "description": sample.description,
        "format": sample.format.value,
        "text": sample.text,
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
