"""
FastAPI backend: REST API over the people view-model and the Telegram webhook.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from peoplebook.config import load_env, load_settings

load_env()

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from telegram import Bot, Update

from api.telegram_ui import ChatSessions, process_update
from peoplebook.di import Container, define_modules
from peoplebook.domain import Person
from peoplebook.presentation import PersonViewModel, people_sorted
from peoplebook.presentation.person_view_model import PERSON_NOT_FOUND
from peoplebook.presentation import intents

_settings = load_settings()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=_settings.log_level,
)
logger = logging.getLogger(__name__)

CLIENT_ID_HEADER = "X-Client-Id"
DEFAULT_CLIENT_ID = "default"


def _get_container(app: FastAPI) -> Container:
    if getattr(app.state, "container", None) is None:
        app.state.container = define_modules(_settings)
    return app.state.container


def _new_sessions(app: FastAPI) -> ChatSessions:
    container = _get_container(app)
    return ChatSessions(lambda: container.get(PersonViewModel), _settings.max_sessions)


def get_view_model(client_id: str, app: FastAPI) -> PersonViewModel:
    """Per-client view-model: the same X-Client-Id keeps its form and undo buffer."""
    if getattr(app.state, "client_sessions", None) is None:
        app.state.client_sessions = _new_sessions(app)
    return app.state.client_sessions.get(client_id).view_model


def _get_sessions(app: FastAPI) -> ChatSessions:
    if getattr(app.state, "sessions", None) is None:
        app.state.sessions = _new_sessions(app)
    return app.state.sessions


def reset_state(app: FastAPI, container: Container | None = None) -> None:
    """Drop cached view-models and chat sessions; optionally install a container."""
    app.state.container = container
    app.state.client_sessions = None
    app.state.sessions = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Store: %s. Telegram webhook: POST /webhook/telegram.", _settings.store
    )
    try:
        _get_container(app)
        yield
    finally:
        container = getattr(app.state, "container", None)
        if container is not None:
            container.close()


app = FastAPI(title="Peoplebook API", lifespan=lifespan)


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: people ---


class PersonBody(BaseModel):
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    image_path: str | None = None


class PersonItem(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    image_path: str | None = None


def _item(person: Person) -> PersonItem:
    return PersonItem(**person.to_dict())


def _client_id(x_client_id: str | None) -> str:
    return (x_client_id or "").strip() or DEFAULT_CLIENT_ID


def _pop_error(view_model: PersonViewModel) -> str | None:
    """Return the pending error message (if any) and clear it: each error is reported once."""
    error_state = view_model.error_state.value
    if error_state is None:
        return None
    view_model.clear_error_state()
    return error_state.message


def _apply_body(view_model: PersonViewModel, body: PersonBody) -> None:
    view_model.on_process_person_intent(intents.FirstNameChange(body.first_name))
    view_model.on_process_person_intent(intents.LastNameChange(body.last_name))
    view_model.on_process_person_intent(intents.EmailChange(body.email))
    view_model.on_process_person_intent(intents.PhoneChange(body.phone))
    view_model.on_process_person_intent(intents.ImagePathChange(body.image_path))


def _fetch_person_or_404(view_model: PersonViewModel, person_id: str) -> Person:
    view_model.on_process_person_intent(intents.FetchById(person_id))
    message = _pop_error(view_model)
    if message is not None and message != PERSON_NOT_FOUND:
        raise HTTPException(status_code=500, detail=message)
    person = view_model.person_ui_state.value.person
    if message is not None or person.id != person_id:
        raise HTTPException(status_code=404, detail=PERSON_NOT_FOUND)
    return person


@app.get("/people")
def list_people(
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    view_model = get_view_model(_client_id(x_client_id), request.app)
    view_model.on_process_people_intent(intents.Fetch())
    message = _pop_error(view_model)
    if message is not None:
        raise HTTPException(status_code=500, detail=message)
    return [_item(p) for p in people_sorted(view_model.people_ui_state.value)]


@app.post("/people/undo")
def undo_remove(
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    view_model = get_view_model(_client_id(x_client_id), request.app)
    person = view_model.removed_person
    if person is None:
        raise HTTPException(status_code=404, detail="Nothing to undo")
    view_model.on_process_person_intent(intents.Undo())
    message = _pop_error(view_model)
    if message is not None:
        raise HTTPException(status_code=500, detail=message)
    return _item(person)


@app.get("/people/{person_id}")
def get_person(
    person_id: str,
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    view_model = get_view_model(_client_id(x_client_id), request.app)
    return _item(_fetch_person_or_404(view_model, person_id))


@app.post("/people")
def create_person(
    body: PersonBody,
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    view_model = get_view_model(_client_id(x_client_id), request.app)
    view_model.on_process_person_intent(intents.Clear())
    _apply_body(view_model, body)
    if not view_model.validate():
        raise HTTPException(status_code=400, detail=_pop_error(view_model))
    view_model.on_process_person_intent(intents.Create())
    message = _pop_error(view_model)
    if message is not None:
        raise HTTPException(status_code=500, detail=message)
    return JSONResponse(
        content=_item(view_model.person_ui_state.value.person).model_dump(),
        status_code=201,
    )


@app.put("/people/{person_id}")
def update_person(
    person_id: str,
    body: PersonBody,
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    view_model = get_view_model(_client_id(x_client_id), request.app)
    _fetch_person_or_404(view_model, person_id)
    _apply_body(view_model, body)
    if not view_model.validate():
        raise HTTPException(status_code=400, detail=_pop_error(view_model))
    view_model.on_process_person_intent(intents.Update())
    message = _pop_error(view_model)
    if message is not None:
        raise HTTPException(status_code=500, detail=message)
    return _item(view_model.person_ui_state.value.person)


@app.delete("/people/{person_id}")
def delete_person(
    person_id: str,
    request: Request,
    x_client_id: str | None = Header(None, alias=CLIENT_ID_HEADER),
):
    """Delete at once; the person stays restorable through POST /people/undo until the next delete."""
    view_model = get_view_model(_client_id(x_client_id), request.app)
    person = _fetch_person_or_404(view_model, person_id)
    view_model.on_process_person_intent(intents.Remove(person))
    message = _pop_error(view_model)
    if message is not None:
        raise HTTPException(status_code=500, detail=message)
    return {
        "id": person.id,
        "message": f"{person.full_name} deleted",
        "undo": "/people/undo",
    }


# --- Telegram webhook (flow-driven) ---


@app.post("/webhook/telegram")
async def webhook_telegram(request: Request):
    """Handle Telegram updates. Set Telegram webhook URL to https://<your-domain>/webhook/telegram"""
    logger.info("Telegram webhook received")
    try:
        body = await request.json()
    except Exception as e:
        logger.warning("Telegram webhook body error: %s", e)
        raise HTTPException(status_code=400, detail="Invalid JSON") from e
    token = _settings.telegram_bot_token
    if not token:
        logger.error("TELEGRAM_BOT_TOKEN not set in backend environment")
        return {}
    bot = Bot(token=token)
    try:
        update = Update.de_json(body, bot)
    except Exception as e:
        logger.warning("Telegram webhook parse error: %s", e)
        raise HTTPException(status_code=400, detail="Invalid update") from e
    if not update or not update.effective_chat:
        logger.warning("Telegram webhook: no update or chat")
        return {}
    async with bot:
        await process_update(
            update,
            bot,
            _get_sessions(request.app),
            phone_region=_settings.phone_region,
            animation_duration=_settings.animation_duration,
        )
    return {}
