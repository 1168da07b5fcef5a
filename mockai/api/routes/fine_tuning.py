from __future__ import annotations

import time

from fastapi import APIRouter, Query

from mockai.schemas.requests import FineTuningJobRequest
from mockai.utils.ids import generate_id

router = APIRouter(prefix="/v1/fine_tuning", tags=["Fine-tuning"])


def _job(job_id: str, *, model: str = "gpt-4o-mini", training_file: str | None = None, status: str = "queued", **extra) -> dict:
    return {
        "object": "fine_tuning.job",
        "id": job_id,
        "model": model,
        "created_at": int(time.time()),
        "finished_at": None,
        "fine_tuned_model": None,
        "organization_id": "org-mockai",
        "result_files": [],
        "status": status,
        "validation_file": None,
        "training_file": training_file or generate_id("file"),
        "hyperparameters": {"n_epochs": "auto", "batch_size": "auto", "learning_rate_multiplier": "auto"},
        "trained_tokens": None,
        "error": None,
        **extra,
    }


@router.post("/jobs")
def create_job(body: FineTuningJobRequest) -> dict:
    job = _job(
        generate_id("ftjob"),
        model=body.model,
        training_file=body.training_file,
        validation_file=body.validation_file,
        suffix=body.suffix,
    )
    if body.hyperparameters:
        job["hyperparameters"] = {**job["hyperparameters"], **body.hyperparameters}
    return job


@router.get("/jobs")
def list_jobs(limit: int = Query(20, ge=1, le=100)) -> dict:
    jobs = [_job(generate_id("ftjob"), status="succeeded") for _ in range(min(limit, 3))]
    return {"object": "list", "data": jobs, "has_more": False}


@router.get("/jobs/{job_id}")
def retrieve_job(job_id: str) -> dict:
    return _job(job_id, status="running")


@router.post("/jobs/{job_id}/cancel")
def cancel_job(job_id: str) -> dict:
    return _job(job_id, status="cancelled")
