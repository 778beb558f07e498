"""FastAPI server for spelldrill application."""

import logging
import os

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

logger = logging.getLogger(__name__)

from core.config import (
    CORRECT_PAUSE_MS, INCORRECT_PAUSE_MS, DEFAULT_STORAGE, EDITABLE_WORD_FIELDS
)
from core.interfaces import Storage
from core.models import Word, StudentProfile

from server.file_storage import FileStorage
from server.practice_host import PracticeHost


# Pydantic models for API
class CreateListRequest(BaseModel):
    title: str


class AddWordRequest(BaseModel):
    text: str
    definition: Optional[str] = None
    part_of_speech: Optional[str] = None
    example_sentence: Optional[str] = None


class UpdateWordRequest(BaseModel):
    field: str
    value: str


class ProfileRequest(BaseModel):
    name: str
    s_class: str = ""
    class_num: str = ""


class InputRequest(BaseModel):
    text: str


class AnswerRequest(BaseModel):
    answer: str


class MasteryModel(BaseModel):
    correct: int
    total: int


class ListSummary(BaseModel):
    id: str
    title: str
    word_count: int
    mastery: MasteryModel
    mastery_strong: bool


class WordModel(BaseModel):
    id: str
    text: str
    definition: str
    part_of_speech: str
    example_sentence: str


class ListDetail(BaseModel):
    id: str
    title: str
    words: list[WordModel]
    mastery: MasteryModel


class ProgressModel(BaseModel):
    index: int
    length: int


class PracticeResponse(BaseModel):
    active: bool
    list_id: Optional[str]
    round: Optional[str]
    current_word: Optional[WordModel]
    user_input: str
    feedback: str
    progress: ProgressModel
    score: int
    total_words: int
    cues: list[dict]  # [{type: speak, text} | {type: play, kind} | {type: round_complete, retry_count}]
    pending_ms: Optional[int]  # Time until the next scheduled step, None when idle
    round_complete: bool
    result: Optional[MasteryModel]


# Global state (in production, use proper DI)
storage: Storage = None
practice_hosts: dict[str, PracticeHost] = {}  # list_id -> host; one session per list


def log_event(event: str, list_id: str = None, **data) -> None:
    """Log an event to the database."""
    if storage and hasattr(storage, 'log_event'):
        host = practice_hosts.get(list_id)
        session = host.controller.session if host else None
        session_id = session.session_id if session else None
        storage.log_event(event, list_id, session_id, **data)


app = FastAPI(title="Spelldrill API", description="Spelling practice API")


def create_storage() -> Storage:
    """Pick the storage backend from SPELLDRILL_STORAGE (file or postgres)."""
    storage_type = os.environ.get('SPELLDRILL_STORAGE', DEFAULT_STORAGE)
    if storage_type == 'postgres':
        from server.postgres_storage import PostgresStorage
        print("Using PostgreSQL storage")
        return PostgresStorage()
    print("Using file storage")
    return FileStorage()


@app.on_event("startup")
async def startup():
    """Initialize storage on startup."""
    global storage
    if storage is None:
        storage = create_storage()


def get_host(list_id: str) -> PracticeHost:
    """Get or create the practice host for a list."""
    if list_id not in practice_hosts:
        host = PracticeHost(list_id, storage)
        host.controller.on_finish(
            lambda result: log_event('practice.finish', list_id,
                                     correct=result['correct'], total=result['total'])
        )
        practice_hosts[list_id] = host
    return practice_hosts[list_id]


def get_word_list_or_404(list_id: str):
    try:
        return storage.get_word_list(list_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"List {list_id} not found")


@app.get("/")
async def root():
    """Service info, used by clients as a health check."""
    return {
        "service": "spelldrill",
        "correct_pause_ms": CORRECT_PAUSE_MS,
        "incorrect_pause_ms": INCORRECT_PAUSE_MS
    }


# Word list endpoints
@app.get("/api/lists", response_model=list[ListSummary])
async def list_word_lists():
    """List all word lists with their mastery."""
    return [word_list.to_summary() for word_list in storage.list_word_lists()]


@app.post("/api/lists")
async def create_word_list(request: CreateListRequest):
    """Create an empty word list."""
    if not request.title.strip():
        return {"success": False, "error": "List title cannot be empty"}
    word_list = storage.create_word_list(request.title)
    logger.info(f"Created list {word_list.id}: {word_list.title}")
    return {"success": True, "list": word_list.to_summary()}


@app.get("/api/lists/{list_id}", response_model=ListDetail)
async def get_word_list(list_id: str):
    """Get a word list with all its words."""
    return get_word_list_or_404(list_id).to_dict()


@app.delete("/api/lists/{list_id}")
async def delete_word_list(list_id: str):
    """Delete a word list and drop any practice session on it."""
    if not storage.delete_word_list(list_id):
        raise HTTPException(status_code=404, detail=f"List {list_id} not found")
    practice_hosts.pop(list_id, None)
    logger.info(f"Deleted list {list_id}")
    return {"success": True}


@app.post("/api/lists/{list_id}/words")
async def add_word(list_id: str, request: AddWordRequest):
    """Add a word to a list. Missing details get placeholders."""
    get_word_list_or_404(list_id)
    if not request.text.strip():
        return {"success": False, "error": "Word cannot be empty"}
    word = Word.create(request.text, request.definition, request.part_of_speech, request.example_sentence)
    storage.add_word(list_id, word)
    return {"success": True, "word": word.to_dict()}


@app.patch("/api/lists/{list_id}/words/{word_id}")
async def update_word(list_id: str, word_id: str, request: UpdateWordRequest):
    """Edit one field of a word."""
    if request.field not in EDITABLE_WORD_FIELDS:
        return {"success": False, "error": f"Field must be one of: {', '.join(EDITABLE_WORD_FIELDS)}"}
    try:
        word = storage.update_word(list_id, word_id, request.field, request.value)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Word {word_id} not found in list {list_id}")
    return {"success": True, "word": word.to_dict()}


@app.delete("/api/lists/{list_id}/words/{word_id}")
async def delete_word(list_id: str, word_id: str):
    """Remove a word from a list."""
    try:
        deleted = storage.delete_word(list_id, word_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"List {list_id} not found")
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Word {word_id} not found in list {list_id}")
    return {"success": True}


# Profile endpoints
@app.get("/api/profile")
async def get_profile():
    """Get the student profile."""
    profile = storage.load_profile()
    return {"profile": profile.to_dict(), "complete": profile.is_complete}


@app.put("/api/profile")
async def save_profile(request: ProfileRequest):
    """Save the student profile. A name is required."""
    profile = StudentProfile(request.name.strip(), request.s_class.strip(), request.class_num.strip())
    if not profile.is_complete:
        return {"success": False, "error": "Name is required"}
    storage.save_profile(profile)
    return {"success": True, "profile": profile.to_dict()}


# Practice endpoints
@app.post("/api/practice/{list_id}/start", response_model=PracticeResponse)
async def start_practice(list_id: str):
    """Start a new practice session on a list, replacing any current one."""
    get_word_list_or_404(list_id)
    host = get_host(list_id)
    if host.start() is None:
        raise HTTPException(status_code=409, detail="Nothing to practice")
    log_event('practice.start', list_id, total_words=host.controller.session.total_words)
    return host.snapshot()


@app.get("/api/practice/{list_id}", response_model=PracticeResponse)
async def get_practice(list_id: str):
    """Get the current practice view and any pending cues."""
    get_word_list_or_404(list_id)
    return get_host(list_id).snapshot()


@app.post("/api/practice/{list_id}/input", response_model=PracticeResponse)
async def update_practice_input(list_id: str, request: InputRequest):
    """Store the text typed so far."""
    get_word_list_or_404(list_id)
    host = get_host(list_id)
    host.controller.update_input(request.text)
    return host.snapshot()


@app.post("/api/practice/{list_id}/answer", response_model=PracticeResponse)
async def submit_practice_answer(list_id: str, request: AnswerRequest):
    """Judge an answer. Ignored while the previous answer is still showing."""
    get_word_list_or_404(list_id)
    host = get_host(list_id)
    before = host.controller.view()
    view = host.controller.submit_answer(request.answer)
    if before['active'] and before['feedback'] == 'none':
        log_event('practice.answer', list_id,
                  word=before['current_word']['text'],
                  answer=request.answer,
                  round=before['round'],
                  feedback=view['feedback'])
    return host.snapshot()


@app.post("/api/practice/{list_id}/repeat", response_model=PracticeResponse)
async def repeat_practice_word(list_id: str):
    """Speak the current word again."""
    get_word_list_or_404(list_id)
    host = get_host(list_id)
    host.controller.repeat_word()
    return host.snapshot()


@app.get("/api/events/recent")
async def get_recent_events(list_id: str = None, limit: int = 50):
    """Get recent practice events."""
    if not hasattr(storage, 'get_recent_events'):
        return {"error": "Event logging not available with current storage"}
    return {"events": storage.get_recent_events(list_id, limit)}


def create_app():
    """Factory function for creating the app."""
    return app
