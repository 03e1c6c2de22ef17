# Main backend file for the running log
import logging
import sys
from datetime import date
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.io.form_parser import distance_input, form_values
from app.io.models import SORTABLE_FIELDS, split_duration
from app.io.store import FileStore, RunStore
from app.metrics.selection import mark_selected, select_by_id
from app.report.render_markdown import render_markdown
from app.runlog import actions

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

FLASH_COOKIE = "flash"
NEW_RUN_COOKIE = "new_run"
NEW_RUN_LABEL = "New!"

# Define FastAPI instance
app = FastAPI(title=settings.app_title)


def get_store() -> RunStore:
    return FileStore(settings.data_dir)


def get_today() -> date:
    return date.today()


def _redirect(url: str, message: Optional[str] = None, status_code: int = 303) -> RedirectResponse:
    response = RedirectResponse(url, status_code=status_code)
    if message:
        response.set_cookie(FLASH_COOKIE, quote(message, safe=""))
    return response


def _read_flash(request: Request) -> Optional[str]:
    raw = request.cookies.get(FLASH_COOKIE)
    return unquote(raw) if raw is not None else None


def _read_new_run_id(request: Request) -> Optional[int]:
    raw = request.cookies.get(NEW_RUN_COOKIE, "")
    return int(raw) if raw.isdigit() else None


def _run_row(run, new_run_id: Optional[int] = None) -> dict:
    row = run.to_display()
    row["label"] = NEW_RUN_LABEL if run.id == new_run_id else None
    return row


def _run_form(run_date: str, hours: str, minutes: str, seconds: str, distance: str) -> dict:
    return {"date": run_date, "hours": hours, "minutes": minutes, "seconds": seconds, "distance": distance}


def _form_rejected(result: actions.ActionResult, form: dict) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": result.message, "errors": result.errors, "values": form_values(form)},
    )


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        logger.warning("Not found: %s", request.url.path)
        return _redirect("/runs", "Page not found!", status_code=302)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
def root():
    return {"message": "Welcome!"}


@app.get("/overview")
def overview(store: RunStore = Depends(get_store), today: date = Depends(get_today)):
    payload = actions.overview(store, today)
    return {
        "stats": payload["pretty"],
        "last_run": payload["last_run"],
        "report": render_markdown(payload),
    }


@app.get("/overview.md", response_class=PlainTextResponse)
def overview_markdown(store: RunStore = Depends(get_store), today: date = Depends(get_today)):
    return render_markdown(actions.overview(store, today))


@app.get("/runs")
def list_runs(request: Request, sort_by: Optional[str] = None, store: RunStore = Depends(get_store)):
    if sort_by is not None and sort_by not in SORTABLE_FIELDS:
        raise HTTPException(status_code=400, detail=f"Cannot sort runs by {sort_by}")

    runs = actions.list_runs(store, sort_by)
    prefs = store.load_prefs()
    message = _read_flash(request)
    new_run_id = _read_new_run_id(request)
    response = JSONResponse(content={
        "message": message,
        "sort_by": prefs.sort_by,
        "sort": prefs.sort,
        "runs": [_run_row(r, new_run_id) for r in runs],
    })
    if message is not None:
        response.delete_cookie(FLASH_COOKIE)
    if NEW_RUN_COOKIE in request.cookies:
        response.delete_cookie(NEW_RUN_COOKIE)
    return response


@app.post("/runs/new")
def add_run(
    run_date: str = Form("", alias="date"),
    hours: str = Form(""),
    minutes: str = Form(""),
    seconds: str = Form(""),
    distance: str = Form(""),
    store: RunStore = Depends(get_store),
    today: date = Depends(get_today),
):
    form = _run_form(run_date, hours, minutes, seconds, distance)
    result = actions.add_run(store, form, today)
    if not result.ok:
        return _form_rejected(result, form)
    response = _redirect("/runs", result.message)
    response.set_cookie(NEW_RUN_COOKIE, str(result.run.id))
    return response


@app.get("/runs/{run_id}/edit")
def edit_run_form(run_id: int, store: RunStore = Depends(get_store)):
    run = select_by_id(store.load_runs(), run_id)
    if run is None:
        raise HTTPException(status_code=404)
    hrs, mins, secs = split_duration(run.duration)
    return {
        "id": run.id,
        "values": {
            "date": run.date_pretty,
            "hours": str(hrs),
            "minutes": str(mins),
            "seconds": str(secs),
            "distance": distance_input(run.distance),
        },
    }


@app.post("/runs/{run_id}/edit")
def edit_run(
    run_id: int,
    run_date: str = Form("", alias="date"),
    hours: str = Form(""),
    minutes: str = Form(""),
    seconds: str = Form(""),
    distance: str = Form(""),
    store: RunStore = Depends(get_store),
    today: date = Depends(get_today),
):
    form = _run_form(run_date, hours, minutes, seconds, distance)
    result = actions.edit_run(store, run_id, form, today)
    if result is None:
        raise HTTPException(status_code=404)
    if not result.ok:
        return _form_rejected(result, form)
    return _redirect("/runs", result.message)


@app.get("/runs/delete/{run_id}")
def confirm_delete(run_id: int, store: RunStore = Depends(get_store)):
    prefs = store.load_prefs()
    runs = actions.list_runs(store)
    if select_by_id(runs, run_id) is None:
        raise HTTPException(status_code=404)
    return {
        "message": "Are you sure you want to delete this run?",
        "sort_by": prefs.sort_by,
        "sort": prefs.sort,
        "runs": [_run_row(r) for r in mark_selected(runs, run_id)],
    }


@app.post("/runs/delete/{run_id}")
def delete_run(run_id: int, store: RunStore = Depends(get_store)):
    result = actions.delete_run(store, run_id)
    if result is None:
        raise HTTPException(status_code=404)
    return _redirect("/runs", result.message)
