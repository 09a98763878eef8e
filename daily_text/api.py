# api.py
"""
Upload/job web service.

  POST /api/process             multipart "epub" (+ optional "year") -> job id
  GET  /api/status/{job_id}     job progress
  GET  /api/download/{result_id} JSON array of daily texts
  GET  /api/health

Run with any ASGI server, e.g. `uvicorn daily_text.api:app --port 3001`.
"""

import json
import logging
import os
import shutil
import tempfile
import threading
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel

from . import __version__
from .config import validate_year
from .errors import DailyTextError
from .pipeline import DailyTextProcessor

ALLOWED_EXTENSIONS = {".epub", ".zip"}
MAX_AGE_SECONDS = 10 * 60

logger = logging.getLogger(__name__)


@dataclass
class Job:
    job_id: str
    filename: str
    status: str = "processing"
    progress: int = 0
    message: str = "Starting..."
    started_at: float = field(default_factory=time.time)
    completed_at: Optional[float] = None
    result_id: Optional[str] = None
    count: Optional[int] = None
    year: Optional[str] = None
    error: Optional[str] = None


@dataclass
class Result:
    year: str
    data: List[Dict[str, str]]
    generated_at: float = field(default_factory=time.time)


class JobStore:
    """In-memory jobs and results; entries older than max_age are pruned."""

    def __init__(self, max_age: float = MAX_AGE_SECONDS):
        self.max_age = max_age
        self.jobs: Dict[str, Job] = {}
        self.results: Dict[str, Result] = {}
        self._lock = threading.Lock()
        self._counter = 0

    def new_job(self, filename: str) -> Job:
        with self._lock:
            self._counter += 1
            job = Job(job_id=f"job-{int(time.time() * 1000)}-{self._counter}", filename=filename)
            self.jobs[job.job_id] = job
        return job

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self.jobs.get(job_id)

    def update(self, job_id: str, **changes: Any) -> None:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None:
                return
            for key, value in changes.items():
                setattr(job, key, value)

    def add_result(self, result_id: str, result: Result) -> None:
        with self._lock:
            self.results[result_id] = result

    def get_result(self, result_id: str) -> Optional[Result]:
        with self._lock:
            return self.results.get(result_id)

    def prune(self, now: Optional[float] = None) -> None:
        now = now or time.time()
        with self._lock:
            for job_id in [
                k for k, j in self.jobs.items()
                if j.completed_at and now - j.completed_at > self.max_age
            ]:
                del self.jobs[job_id]
                logger.info(f"Cleaned up old job: {job_id}")
            for result_id in [
                k for k, r in self.results.items() if now - r.generated_at > self.max_age
            ]:
                del self.results[result_id]
                logger.info(f"Cleaned up old result: {result_id}")


class ProcessResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobResponse(BaseModel):
    job_id: str
    filename: str
    status: str
    progress: int
    message: str
    started_at: float
    completed_at: Optional[float] = None
    result_id: Optional[str] = None
    count: Optional[int] = None
    year: Optional[str] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    uptime: float
    version: str


app = FastAPI(title="Daily Text EPUB API", version=__version__)
store = JobStore()
STARTED = time.time()


def process_job(job_id: str, upload_path: Path, year: Optional[str]) -> None:
    work_dir = Path(tempfile.mkdtemp(prefix=f"epub-job-{job_id}-"))
    try:
        store.update(job_id, progress=10, message="Initializing processor...")
        processor = DailyTextProcessor(
            upload_path,
            year=year,
            work_dir=work_dir / "Lab",
            output_path=work_dir / "output.json",
            logger=logger,
        )

        store.update(job_id, progress=30, message="Extracting EPUB...")
        content_dir = processor.extractor.extract()
        resolved_year = processor.resolve_year()

        store.update(job_id, progress=60, message="Processing XHTML files...", year=resolved_year)
        records = processor.process_only()

        store.update(job_id, progress=90, message="Finalizing...")
        result_id = f"result-{job_id}"
        store.add_result(result_id, Result(year=resolved_year, data=[r.to_dict() for r in records]))

        store.update(
            job_id,
            status="completed",
            progress=100,
            message="Processing complete!",
            result_id=result_id,
            count=len(records),
            completed_at=time.time(),
        )
        logger.info(f"[{job_id}] Completed: {len(records)} daily texts from {content_dir}")
    except Exception as e:
        logger.exception(f"[{job_id}] Processing error")
        store.update(job_id, status="error", error=str(e), completed_at=time.time())
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
        try:
            os.unlink(upload_path)
        except OSError as e:
            logger.error(f"[{job_id}] Error cleaning temp file: {e}")


@app.post("/api/process", response_model=ProcessResponse)
def process_epub(
    background_tasks: BackgroundTasks,
    epub: Optional[UploadFile] = File(None),
    year: Optional[str] = Form(None),
):
    store.prune()
    if epub is None or not epub.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    ext = Path(epub.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only EPUB/ZIP files are allowed")

    if year:
        try:
            year = validate_year(year)
        except DailyTextError as e:
            raise HTTPException(status_code=400, detail=str(e))

    fd, tmp_name = tempfile.mkstemp(prefix="epub-upload-", suffix=ext)
    with os.fdopen(fd, "wb") as fh:
        shutil.copyfileobj(epub.file, fh)

    job = store.new_job(epub.filename)
    logger.info(f"[{job.job_id}] Starting processing: {epub.filename}")
    background_tasks.add_task(process_job, job.job_id, Path(tmp_name), year or None)

    return ProcessResponse(job_id=job.job_id, status="started", message="Processing started")


@app.get("/api/status/{job_id}", response_model=JobResponse)
def get_status(job_id: str):
    store.prune()
    job = store.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return JobResponse(**asdict(job))


@app.get("/api/download/{result_id}")
def download(result_id: str):
    store.prune()
    result = store.get_result(result_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Result not found")

    body = json.dumps(result.data, ensure_ascii=False, indent=2)
    return Response(
        content=body.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="daily-texts-{result.year}.json"'},
    )


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", uptime=time.time() - STARTED, version=__version__)
