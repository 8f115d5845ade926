from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from roomboard.cache import BookingQueryCache
from roomboard.config import get_settings
from roomboard.grid import GridGeometry
from roomboard.handlers import apply_error_handlers, limiter
from roomboard.logging_middleware import add_audit_middleware
from roomboard.scheduling import BookingScheduler
from roomboard.schemas import (
    Booking,
    BookingCreate,
    BookingPatch,
    DeleteResult,
    GridConfig,
    MoveRequest,
    Room,
    WeekView,
)
from roomboard.store import build_store

settings = get_settings()
bookings_cache = BookingQueryCache(ttl=settings.bookings_cache_ttl)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    fastapi_app.state.scheduler = BookingScheduler(
        build_store(settings),
        geometry=GridGeometry.from_settings(settings),
    )
    yield


def create_app() -> FastAPI:
    fastapi_app = FastAPI(title="Room Bookings Service", version="1.0.0", lifespan=lifespan)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    apply_error_handlers(fastapi_app)
    add_audit_middleware(fastapi_app, "bookings", settings.log_dir)
    Instrumentator().instrument(fastapi_app).expose(fastapi_app)
    return fastapi_app


app = create_app()


def get_scheduler(request: Request) -> BookingScheduler:
    return request.app.state.scheduler


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok", "service": "bookings"}


@app.get("/api/rooms", response_model=List[Room])
def list_rooms(scheduler: BookingScheduler = Depends(get_scheduler)) -> List[Room]:
    return scheduler.list_rooms()


@app.get("/api/grid", response_model=GridConfig)
def grid_config(scheduler: BookingScheduler = Depends(get_scheduler)) -> GridConfig:
    return scheduler.geometry.config()


@app.get("/api/bookings", response_model=List[Booking])
@limiter.limit("60/minute")
def list_bookings(
    request: Request,
    date: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> List[Booking]:
    cache_key = bookings_cache.key(date, start_date, end_date)
    cached = bookings_cache.get(cache_key)
    if cached is not None:
        return cached
    generation = bookings_cache.generation
    bookings = scheduler.list_bookings(date=date, start_date=start_date, end_date=end_date)
    bookings_cache.set(cache_key, bookings, generation)
    return bookings


@app.get("/api/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: int, scheduler: BookingScheduler = Depends(get_scheduler)) -> Booking:
    return scheduler.get_booking(booking_id)


@app.post("/api/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_booking(
    request: Request,
    booking_in: BookingCreate,
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> Booking:
    booking = scheduler.create_booking(booking_in)
    bookings_cache.invalidate()
    return booking


@app.put("/api/bookings/{booking_id}", response_model=Booking)
@limiter.limit("30/minute")
def update_booking(
    request: Request,
    booking_id: int,
    booking_update: BookingPatch,
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> Booking:
    booking = scheduler.update_booking(booking_id, booking_update)
    bookings_cache.invalidate()
    return booking


@app.post("/api/bookings/{booking_id}/move", response_model=Booking)
@limiter.limit("60/minute")
def move_booking(
    request: Request,
    booking_id: int,
    move: MoveRequest,
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> Booking:
    booking = scheduler.move_booking(booking_id, move.date, move.pixel_y)
    bookings_cache.invalidate()
    return booking


@app.delete("/api/bookings/{booking_id}", response_model=DeleteResult)
@limiter.limit("30/minute")
def delete_booking(
    request: Request,
    booking_id: int,
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> DeleteResult:
    scheduler.delete_booking(booking_id)
    bookings_cache.invalidate()
    return DeleteResult(success=True)


@app.get("/api/calendar", response_model=WeekView)
def week_calendar(
    date: str = Query(...),
    room_id: int = Query(..., alias="roomId"),
    scheduler: BookingScheduler = Depends(get_scheduler),
) -> WeekView:
    return scheduler.week_view(date, room_id)
