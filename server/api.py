"""FastAPI server exposing the outfit engines for the web client."""

from fastapi import FastAPI, HTTPException

from kikonasu_app.app import KikonasuApp
from kikonasu_app.logging_config import configure_logging
from logic.validation import (
    CapsuleRequest,
    GenerateOutfitRequest,
    PotentialRequest,
    SessionRequest,
    ShuffleRequest,
    TemplateMatchRequest,
    TemplateRecommendRequest,
    TripRequest,
)
from models.taxonomy import is_known_category

configure_logging()

kikonasu_app = KikonasuApp()
app = FastAPI(title="Kikonasu", version="0.1.0")


def _checked(response: dict) -> dict:
    """Map non-ok statuses onto HTTP errors."""

    status = response.get("status")
    if status == "not_found":
        raise HTTPException(status_code=404, detail=response.get("message", "not found"))
    if status != "ok":
        raise HTTPException(status_code=400, detail=response)
    return response


def _require_category(category: str) -> str:
    if not is_known_category(category):
        raise HTTPException(status_code=422, detail=f"Unknown category '{category}'")
    return category


@app.get("/healthz")
async def healthcheck() -> dict:
    """Lightweight readiness check."""

    return {
        "status": "ok",
        "service": "kikonasu",
        "environment": kikonasu_app.config.environment or "local",
    }


@app.post("/outfits/generate")
async def generate(request: GenerateOutfitRequest) -> dict:
    """Draw today's look from the supplied wardrobe."""

    response = kikonasu_app.todays_look(
        [item.to_item() for item in request.items],
        weather=request.weather.to_weather() if request.weather else None,
        used_item_ids=request.used_item_ids,
    )
    return _checked(response)


@app.post("/sessions")
async def create_session(request: SessionRequest) -> dict:
    """Start an editing session and return its first outfit."""

    response = kikonasu_app.start_session(
        [item.to_item() for item in request.items],
        weather=request.weather.to_weather() if request.weather else None,
    )
    return _checked(response)


@app.post("/sessions/{session_id}/shuffle")
async def shuffle(session_id: str, request: ShuffleRequest) -> dict:
    return _checked(kikonasu_app.shuffle(session_id, locked=request.locked))


@app.post("/sessions/{session_id}/locks/{category}")
async def toggle_lock(session_id: str, category: str) -> dict:
    return _checked(kikonasu_app.toggle_lock(session_id, _require_category(category)))


@app.delete("/sessions/{session_id}/locks")
async def unlock_all(session_id: str) -> dict:
    return _checked(kikonasu_app.unlock_all(session_id))


@app.delete("/sessions/{session_id}/items/{category}")
async def remove_item(session_id: str, category: str) -> dict:
    return _checked(kikonasu_app.remove_item(session_id, _require_category(category)))


@app.delete("/sessions/{session_id}")
async def end_session(session_id: str) -> dict:
    """Discard an editing session."""

    if not kikonasu_app.end_session(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown session '{session_id}'")
    return {"status": "ok", "session_id": session_id}


@app.post("/capsules/summary")
async def capsule_summary(request: CapsuleRequest) -> dict:
    """Outfit totals and gap suggestions for a capsule selection."""

    return kikonasu_app.capsule_summary(
        [item.to_item() for item in request.selected],
        [item.to_item() for item in request.wardrobe],
    )


@app.post("/capsules/potential")
async def capsule_potential(request: PotentialRequest) -> dict:
    """How many outfits a prospective item of a category would add."""

    return kikonasu_app.outfit_potential(request.category, [item.to_item() for item in request.wardrobe])


@app.post("/capsules/templates/recommend")
async def recommend_templates(request: TemplateRecommendRequest) -> dict:
    """Capsule templates ranked by how well they suit the wardrobe."""

    return kikonasu_app.recommend_templates([item.to_item() for item in request.wardrobe])


@app.post("/capsules/templates/{template_id}/match")
async def match_template(template_id: str, request: TemplateMatchRequest) -> dict:
    """Which template items the wardrobe already covers and what the rest would cost."""

    response = kikonasu_app.match_template(
        template_id,
        [item.to_item() for item in request.wardrobe],
        manual_matches=request.manual_matches,
    )
    return _checked(response)


@app.post("/trips/plan")
async def plan_trip(request: TripRequest) -> dict:
    """Plan one outfit per day for a trip."""

    forecasts = None
    if request.forecasts is not None:
        forecasts = [entry.to_weather() if entry else None for entry in request.forecasts]
    response = kikonasu_app.plan_trip(
        [item.to_item() for item in request.items],
        days=request.days,
        occasion=request.occasion,
        forecasts=forecasts,
        lat=request.lat,
        lon=request.lon,
    )
    return _checked(response)


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int("8080"), reload=False)
