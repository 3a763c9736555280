import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from clinic_api import database
from clinic_api.core import config
from clinic_api.core.errors import ClinicError
from clinic_api.models import appointment, clinic_settings, dentist, patient, time_slot, user  # noqa: F401
from clinic_api.routes import appointment_routes, auth_routes, dentist_routes
from clinic_api.services.schedule_service import ScheduleService

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title='Dental Clinic Scheduling API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.exception_handler(ClinicError)
def handle_clinic_error(request: Request, exc: ClinicError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={'detail': exc.detail})


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()

    if database.engine is None:
        logger.warning('DATABASE_URL is not set; store-backed endpoints will answer 503.')
        return

    try:
        database.Base.metadata.create_all(bind=database.engine)
        database.ensure_schema_indexes()
        db = database.SessionLocal()
        try:
            ScheduleService(db).ensure_default_clinic_settings()
        finally:
            db.close()
    except (SQLAlchemyError, ClinicError):
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Dental Clinic API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(appointment_routes.admin_router, prefix='/appointments')
app.include_router(dentist_routes.router, prefix='/dentists')
