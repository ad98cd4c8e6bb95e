# fastapi web api for asking grounded questions about an uploaded pdf
from fastapi import APIRouter, Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
import logging
import threading
from typing import Optional

from . import __version__
from .analyzer_service import FileAnalyzerService
from .config import get_settings
from .errors import SessionNotFoundError, ValidationError
from .export import EXPORT_FILENAME, EXPORT_MEDIA_TYPE
from .llm_service import get_llm_service
from .models import HistoryResponse, TopicResult, UploadResponse
from .pdf_parser import PDFTextExtractor
from .session import SessionStore

settings = get_settings()

# configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# initialize fastapi application
app = FastAPI(
    title="File Analyzer API",
    description="Ask questions grounded in an uploaded PDF and export the session",
    version=__version__
)

# add cors middleware so the react frontend can call the api
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/api/FileAnalyzer")

# global instance, created on first request
analyzer_service = None
_analyzer_service_lock = threading.Lock()


# get or create the analyzer service shared by every request
def get_analyzer_service() -> FileAnalyzerService:
    global analyzer_service
    if analyzer_service is None:
        # concurrent first requests must all share one session store
        with _analyzer_service_lock:
            if analyzer_service is None:
                analyzer_service = FileAnalyzerService(
                    PDFTextExtractor(),
                    get_llm_service(),
                    SessionStore(max_sessions=settings.max_sessions)
                )
    return analyzer_service


# ============================================================================
# API ROUTES
# handlers are plain functions so fastapi runs the blocking llm calls in its threadpool
# ============================================================================

# endpoint to upload a pdf and start (or reset) a session
@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(...),
    session_id: Optional[str] = Form(None),
    service: FileAnalyzerService = Depends(get_analyzer_service)
):
    """Upload a PDF file"""
    try:
        content = file.file.read()
        session = service.upload(content, file.content_type, session_id)
        logger.info(f"File uploaded: {file.filename} -> session {session.session_id}")

        return UploadResponse(
            message="File uploaded successfully.",
            session_id=session.session_id
        )

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error uploading file: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")


# endpoint to search the uploaded pdf for a topic
@router.post("/search", response_model=TopicResult)
def search_topic(
    topic: str = Form(...),
    session_id: Optional[str] = Form(None),
    service: FileAnalyzerService = Depends(get_analyzer_service)
):
    """Answer a topic using only the uploaded PDF"""
    logger.info(f"SearchTopic endpoint reached with topic: {topic}")
    try:
        return TopicResult(result=service.search(session_id, topic))

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error searching topic: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Search failed: {str(e)}")


# endpoint to expand a searched topic with outside information
@router.post("/expand", response_model=TopicResult)
def expand_topic(
    topic: str = Form(...),
    session_id: Optional[str] = Form(None),
    service: FileAnalyzerService = Depends(get_analyzer_service)
):
    """Expand on a topic that was already searched"""
    try:
        return TopicResult(result=service.expand(session_id, topic))

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error expanding topic: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Expand failed: {str(e)}")


# endpoint to download the session as a text file
@router.get("/export")
def export_chat_log(
    session_id: Optional[str] = None,
    service: FileAnalyzerService = Depends(get_analyzer_service)
):
    """Download the chat log as ChatLogExport.txt"""
    try:
        content = service.export(session_id)
        return Response(
            content=content,
            media_type=EXPORT_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'}
        )

    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error exporting chat log: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Export failed: {str(e)}")


@router.get("/history", response_model=HistoryResponse)
def get_history(
    session_id: Optional[str] = None,
    service: FileAnalyzerService = Depends(get_analyzer_service)
):
    """Topics discussed so far in this session"""
    return HistoryResponse(session_id=session_id, entries=service.history(session_id))


app.include_router(router)


@app.get("/api")
async def api_info():
    """API information endpoint"""
    return {
        "message": "File Analyzer API",
        "version": __version__,
        "endpoints": {
            "upload": "/api/FileAnalyzer/upload",
            "search": "/api/FileAnalyzer/search",
            "expand": "/api/FileAnalyzer/expand",
            "export": "/api/FileAnalyzer/export",
            "history": "/api/FileAnalyzer/history",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "file-analyzer"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
