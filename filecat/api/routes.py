# API routes

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from pydantic import BaseModel

from filecat.catalog.file_types import (
    JSON_MIME_TYPE,
    CatalogSummary,
    detect_mime_type,
    format_file_size,
    generate_file_path,
    get_folder_path,
    summarize_json_upload,
)
from filecat.common.logging_config import get_structured_logger
from filecat.config.settings import SchemaConfig, Settings, get_settings
from filecat.ingest.json_processor import JsonAnalyzer
from filecat.ingest.parser import ParseError

logger = get_structured_logger(__name__)

router = APIRouter()


class ClassifyResponse(BaseModel):
    mimeType: str
    folderPath: str
    filePath: str
    size: int
    sizeLabel: str
    category: str
    confidence: float


@lru_cache()
def get_analyzer() -> JsonAnalyzer:
    return JsonAnalyzer(SchemaConfig.from_settings())


async def read_json_body(request: Request, settings: Settings = Depends(get_settings)) -> bytes:
    """Raw request body, rejected with 413 above ``max_payload_bytes``."""
    body = await request.body()
    if len(body) > settings.max_payload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"JSON payload size {len(body)} exceeds maximum {settings.max_payload_bytes} bytes",
        )
    return body


def _parse_error(e: ParseError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())


@router.post("/schema")
def infer_schema_endpoint(
    body: bytes = Depends(read_json_body),
    analyzer: JsonAnalyzer = Depends(get_analyzer),
):
    """
    Infer the structural schema of a raw JSON request body.

    Returns 400 with the parser message when the body is not valid JSON.
    """
    try:
        schema = analyzer.infer_schema(body)
    except ParseError as e:
        raise _parse_error(e) from e
    return schema.to_dict()


@router.post("/analyze")
def analyze_endpoint(
    include_ddl: bool = Query(False, description="Include a CREATE TABLE statement"),
    collection_name: Optional[str] = Query(None, description="Table/collection name override for DDL"),
    explain: bool = Query(False, description="Include a readable report of the storage decision"),
    body: bytes = Depends(read_json_body),
    analyzer: JsonAnalyzer = Depends(get_analyzer),
):
    """
    Analyze a raw JSON request body.

    - **include_ddl**: add the DDL for the recommended storage
    - **collection_name**: name to use in the DDL instead of the inferred one
    - **explain**: add the storage decision report

    Returns the schema, the recommended storage type and, for relational
    data, the table name and columns.
    """
    try:
        result = analyzer.analyze(body)
    except ParseError as e:
        raise _parse_error(e) from e

    response = result.to_dict()
    response["reason"] = result.reason
    if include_ddl:
        response["ddl"] = analyzer.generate_ddl(result, collection_name)
    if explain:
        response["explanation"] = analyzer.explain(result)
    return response


@router.post("/classify", response_model=ClassifyResponse)
def classify_upload(
    file: UploadFile = File(...),
    analyzer: JsonAnalyzer = Depends(get_analyzer),
    settings: Settings = Depends(get_settings),
):
    """
    Catalog an uploaded file.

    Assigns the MIME type, storage folder and storage path. JSON files
    are analyzed for a storage recommendation; other files are left
    Unclassified for the external inference services.
    """
    content = file.file.read()
    filename = file.filename or "upload"

    mime_type = detect_mime_type(filename, file.content_type)
    folder_path = get_folder_path(mime_type)

    if mime_type == JSON_MIME_TYPE:
        if len(content) > settings.max_payload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"JSON file size {len(content)} exceeds maximum {settings.max_payload_bytes} bytes",
            )
        summary = summarize_json_upload(content, analyzer)
    else:
        summary = CatalogSummary.unclassified()

    logger.info(
        "Upload classified",
        upload_name=filename,
        mime_type=mime_type,
        category=summary.category,
    )

    return ClassifyResponse(
        mimeType=mime_type,
        folderPath=folder_path,
        filePath=generate_file_path(filename, folder_path),
        size=len(content),
        sizeLabel=format_file_size(len(content)),
        category=summary.category,
        confidence=summary.confidence,
    )
