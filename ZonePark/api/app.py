# Standaard imports
import logging
import os
from typing import Optional

# 3rd party
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Path, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field, model_validator

# Locale imports
from ZonePark.api import authentication, price_calculator, session_manager
from ZonePark.api.DBConnection import DBConnection
from ZonePark.api.DataAccess.AccessUsers import AccessUsers
from ZonePark.api.DataAccess.AccessVehicles import AccessVehicles
from ZonePark.api.DataAccess.AccessZones import AccessZones
from ZonePark.api.DataAccess.Logger import Logger
from ZonePark.api.Models.Parking import ACTIVE, SETTLED
from ZonePark.api.Models.User import User
from ZonePark.api.Models.Vehicle import Vehicle
from ZonePark.api.errors import ZoneParkError
from ZonePark.api.parking_service import ParkingService
from ZonePark.api.resources import parking_resource, vehicle_resource, zone_resource
from ZonePark.middleware.performance_tracer import PerformanceTracer

logging.basicConfig(level=logging.INFO)

get_current_user = authentication.get_current_user

DATA_DIR = (
    os.environ.get("ZONEPARK_DB_DIR")
    or os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..", "ZonePark-api-data")
)
os.makedirs(DATA_DIR, exist_ok=True)

TOKEN_TTL_MINUTES = int(os.environ.get("ZONEPARK_TOKEN_TTL_MINUTES", "120"))
_CORS_ORIGINS = [o.strip() for o in os.environ.get("ZONEPARK_CORS_ORIGINS", "").split(",") if o.strip()]

db_path = os.path.join(DATA_DIR, "ZoneParkData.db")
connection = DBConnection(database_path=db_path)

access_users = AccessUsers(conn=connection)
access_vehicles = AccessVehicles(conn=connection)
access_zones = AccessZones(conn=connection)
parking_service = ParkingService(conn=connection)

logger = Logger(path=os.path.join(DATA_DIR, "access.log"))

app = FastAPI(title="ZonePark API", version="1.0.0")

app.add_middleware(PerformanceTracer)

if _CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

router = APIRouter(prefix="/api/v1")

# sqlite INTEGER is signed 64 bit
MAX_ID = 2**63 - 1


@app.exception_handler(ZoneParkError)
async def parking_error_handler(request: Request, exc: ZoneParkError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: str = Field(min_length=8)
    password_confirmation: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("The password confirmation does not match.")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str
    remember: bool = False


class ProfileUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)


class PasswordUpdate(BaseModel):
    current_password: str
    password: str = Field(min_length=8)
    password_confirmation: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.password_confirmation:
            raise ValueError("The password confirmation does not match.")
        return self


class VehicleRequest(BaseModel):
    plate_number: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)


class ParkingStartRequest(BaseModel):
    vehicle_id: int = Field(gt=0, le=MAX_ID)
    zone_id: int = Field(gt=0, le=MAX_ID)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "200 OK - ZonePark API is running"


# ---- auth ----

@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest):
    user = User(
        name=body.name,
        email=body.email,
        password=authentication.hash_password(body.password),
        created_at=price_calculator.utcnow(),
    )
    access_users.add_user(user)
    logger.log(user=user, endpoint="/auth/register")

    token = authentication.new_token()
    session_manager.add_session(token, user, ttl_minutes=TOKEN_TTL_MINUTES)
    return {"access_token": token}


@router.post("/auth/login", status_code=status.HTTP_201_CREATED)
async def login(body: LoginRequest):
    user = access_users.get_user_byemail(body.email)
    if user is None or not authentication.verify_password(body.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"email": ["The provided credentials are incorrect."]},
        )

    token = authentication.new_token()
    session_manager.add_session(token, user, ttl_minutes=None if body.remember else TOKEN_TTL_MINUTES)
    logger.log(user=user, endpoint="/auth/login")
    return {"access_token": token}


@router.post("/auth/logout")
async def logout(request: Request, user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/auth/logout")
    token = authentication.extract_bearer_token(request.headers)
    session_manager.remove_session(token)
    return {"message": "Logged out."}


@router.get("/profile")
async def get_profile(user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/profile")
    return {"name": user.name, "email": user.email}


@router.put("/profile", status_code=status.HTTP_202_ACCEPTED)
async def update_profile(body: ProfileUpdate, user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/profile")
    updated = User(id=user.id, name=body.name, email=body.email.lower(), password=user.password, created_at=user.created_at)
    access_users.update_user(updated)
    session_manager.update_session_user(updated)
    return {"name": updated.name, "email": updated.email}


@router.put("/password", status_code=status.HTTP_202_ACCEPTED)
async def update_password(body: PasswordUpdate, user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/password")
    if not authentication.verify_password(body.current_password, user.password):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"current_password": ["The password is incorrect."]},
        )

    updated = User(id=user.id, name=user.name, email=user.email, password=authentication.hash_password(body.password), created_at=user.created_at)
    access_users.update_user(updated)
    session_manager.update_session_user(updated)
    return {"message": "Your password has been updated."}


# ---- zones ----

@router.get("/zones")
async def list_zones():
    return [zone_resource(zone) for zone in access_zones.get_all_zones()]


# ---- vehicles ----

@router.get("/vehicles")
async def list_vehicles(user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/vehicles")
    return [vehicle_resource(v) for v in access_vehicles.get_vehicles_byuser(user)]


@router.post("/vehicles", status_code=status.HTTP_201_CREATED)
async def create_vehicle(body: VehicleRequest, user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/vehicles")
    vehicle = Vehicle(
        user=user,
        plate_number=body.plate_number,
        description=body.description,
        created_at=price_calculator.utcnow(),
    )
    access_vehicles.add_vehicle(vehicle)
    return vehicle_resource(vehicle)


@router.get("/vehicles/{vid}")
async def get_vehicle(vid: int = Path(gt=0, le=MAX_ID), user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/vehicles/{vid}")
    return vehicle_resource(access_vehicles.get_vehicle(vid, user=user))


@router.put("/vehicles/{vid}", status_code=status.HTTP_202_ACCEPTED)
async def update_vehicle(body: VehicleRequest, vid: int = Path(gt=0, le=MAX_ID), user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/vehicles/{vid}")
    vehicle = access_vehicles.get_vehicle(vid, user=user)
    vehicle.plate_number = body.plate_number
    vehicle.description = body.description
    access_vehicles.update_vehicle(vehicle)
    return vehicle_resource(vehicle)


@router.delete("/vehicles/{vid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(vid: int = Path(gt=0, le=MAX_ID), user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/vehicles/{vid}")
    vehicle = access_vehicles.get_vehicle(vid, user=user)
    access_vehicles.delete_vehicle(vehicle)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- parkings ----

@router.post("/parkings/start", status_code=status.HTTP_201_CREATED)
async def start_parking(body: ParkingStartRequest, user: User = Depends(get_current_user)):
    """
    Start a parking for one of the user's vehicles in a zone.

    - 404 if the vehicle or zone does not exist (or the vehicle is not yours)
    - 409 if the vehicle already has an active parking
    """
    logger.log(user=user, endpoint="/parkings/start")
    parking = parking_service.start_session(user, body.vehicle_id, body.zone_id)
    return parking_resource(parking, now=parking_service.clock())


@router.get("/parkings")
async def list_parkings(
    state: Optional[str] = Query(default=None, pattern="^(active|stopped)$"),
    user: User = Depends(get_current_user),
):
    logger.log(user=user, endpoint="/parkings")
    states = {"active": ACTIVE, "stopped": SETTLED}
    parkings = parking_service.list_sessions(user, state=states.get(state))
    now = parking_service.clock()
    return [parking_resource(p, now=now) for p in parkings]


@router.get("/parkings/{pid}")
async def show_parking(pid: int = Path(gt=0, le=MAX_ID), user: User = Depends(get_current_user)):
    logger.log(user=user, endpoint="/parkings/{pid}")
    parking = parking_service.get_session(user, pid)
    return parking_resource(parking, now=parking_service.clock())


@router.put("/parkings/{pid}")
async def stop_parking(pid: int = Path(gt=0, le=MAX_ID), user: User = Depends(get_current_user)):
    """Stop an active parking. 409 if it was already stopped."""
    logger.log(user=user, endpoint="/parkings/{pid}")
    parking = parking_service.stop_session(user, pid)
    return parking_resource(parking)


app.include_router(router)


if __name__ == "__main__":
    uvicorn.run("ZonePark.api.app:app", host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
