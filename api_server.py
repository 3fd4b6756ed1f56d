# ========================
# api_server.py
# ========================

"""
FastAPI Server for the Event Log Pipeline

Provides REST API endpoints for uploading event-log CSV files (or generating
a sample dataset) and returning the cleaning log and aggregations.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, File, UploadFile, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from eventlab.pipeline.orchestrator import EventPipeline
from eventlab.utils.config import Config
from eventlab.utils.data_generator import DataGenerator
from eventlab.utils.logging_setup import setup_logging_from_config

# Configuration
config = Config()

# Setup logging
setup_logging_from_config(config)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Event Log Pipeline API",
    description="Clean raw event logs and summarize revenue by country and per user",
    version="1.0.0"
)

# Add CORS middleware to allow frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

pipeline = EventPipeline(config=config)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Event Log Pipeline API",
        "version": "1.0.0",
        "endpoints": {
            "upload": "/upload - Upload an event-log CSV file",
            "sample": "/sample - Generate and process a sample dataset",
            "health": "/health - Health check",
            "api_docs": "/docs - API documentation"
        },
        "api_docs_url": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    preview_rows: Optional[int] = Query(None, description="Number of cleaned rows to include in the preview", ge=0, le=100)
):
    """
    Upload a CSV file and run it through the pipeline.

    Args:
        file: Event-log CSV with a header row
        preview_rows: Number of cleaned rows to return (0-100)

    Returns:
        dict: Cleaning log, aggregations, display views and preview
    """
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(status_code=400, detail="Only CSV files are supported")

    content = await file.read()
    if len(content) > config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {config.MAX_UPLOAD_MB} MB upload limit"
        )
    if not content.strip():
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    try:
        # Run the pipeline off the event loop
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, pipeline.run_csv_text, text, file.filename)
    except Exception as e:
        logger.error(f"Processing upload '{file.filename}' failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Processing failed: {str(e)}")

    logger.info(f"Processed upload {file.filename}: {len(result.cleaned)} cleaned rows")
    return pipeline.report(result, preview_rows)


@app.post("/sample")
async def process_sample(
    num_rows: Optional[int] = Query(None, description="Number of regular rows to generate", ge=1, le=100000),
    seed: Optional[int] = Query(None, description="Random seed for a reproducible dataset"),
    preview_rows: Optional[int] = Query(None, description="Number of cleaned rows to include in the preview", ge=0, le=100)
):
    """
    Generate a messy sample dataset and run it through the pipeline.

    Args:
        num_rows: Regular rows to generate (four messy rows are always added)
        seed: Optional random seed
        preview_rows: Number of cleaned rows to return (0-100)

    Returns:
        dict: Cleaning log, aggregations, display views and preview
    """
    num_rows = num_rows or config.SAMPLE_ROWS
    seed = seed if seed is not None else config.SAMPLE_SEED

    def generate_and_run():
        rows = DataGenerator(seed=seed).generate_rows(num_rows=num_rows, num_users=config.SAMPLE_USERS)
        return pipeline.run(rows, source="sample")

    try:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, generate_and_run)
    except Exception as e:
        logger.error(f"Sample pipeline run failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Processing failed: {str(e)}")

    return pipeline.report(result, preview_rows)


def start_server(host: Optional[str] = None, port: Optional[int] = None, reload: bool = False):
    """Start the FastAPI server."""
    host = host or config.API_HOST
    port = port or config.API_PORT
    logger.info(f"Starting Event Log Pipeline API server on {host}:{port}")
    uvicorn.run(
        "api_server:app",
        host=host,
        port=port,
        reload=reload,
        log_level=config.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    start_server(reload=True)
