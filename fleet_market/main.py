import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from fleet_market.core import config
from fleet_market.database import Database
from fleet_market.routes import auth_routes, pricing_routes, rental_routes, service_routes

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    config.validate_runtime_config()

    app = FastAPI(title='Fleet Market API')
    app.state.database = database or Database(config.DATABASE_URL, echo=config.DATABASE_ECHO)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.on_event('startup')
    def initialize_database() -> None:
        try:
            app.state.database.create_all()
            app.state.database.ensure_service_schema()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')

    @app.on_event('shutdown')
    def close_database() -> None:
        app.state.database.dispose()

    @app.get('/')
    def root():
        return {'status': 'Fleet Market API Running'}

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(service_routes.router, prefix='/service')
    app.include_router(rental_routes.router, prefix='/rental')
    app.include_router(pricing_routes.router, prefix='/pricing')

    return app
