from collections.abc import Iterator
from datetime import date
from threading import Lock

from fastapi import Request
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


Base = declarative_base()

# Canonical appointment column -> column name used by older deployments. A
# legacy column may feed more than one canonical column.
# Reads only ever see the canonical name; the legacy value is folded in once
# by ensure_service_schema().
LEGACY_APPOINTMENT_COLUMNS = {
    'service_type_name': 'service_type',
    'equipment_make': 'equipment_brand',
    'custom_description': 'description',
    'technician': 'assigned_technician',
    'internal_notes': 'technician_notes',
    'customer_notes': 'description',
}

CANONICAL_APPOINTMENT_COLUMN_TYPES = {
    'service_type_name': 'VARCHAR',
    'equipment_make': 'VARCHAR',
    'custom_description': 'TEXT',
    'technician': 'VARCHAR',
    'internal_notes': 'TEXT',
    'customer_notes': 'TEXT',
    'cancel_reason': 'VARCHAR',
    'contacted_at': 'TIMESTAMP',
}


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in database_url or database_url == 'sqlite://':
            options['poolclass'] = StaticPool
        return create_engine(database_url, echo=echo, **options)

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class Database:
    """Owns the engine and session factory for one application instance.

    Constructed once by the caller and handed to ``create_app``; request
    handlers receive sessions through the ``get_db`` dependency rather than
    importing a shared client.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.engine = build_engine(database_url, echo=echo)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            info={'database': self},
        )
        self._schema_lock = Lock()
        self._booking_locks: dict[tuple[int, date], Lock] = {}
        self._booking_locks_guard = Lock()
        self._service_schema_checked = False

    def create_all(self) -> None:
        # Imported for their side effect of registering tables on Base.
        from fleet_market.models import rental, service, site, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def ensure_service_schema(self) -> None:
        if self._service_schema_checked:
            return

        with self._schema_lock:
            if self._service_schema_checked:
                return

            inspector = inspect(self.engine)

            if 'service_appointments' not in inspector.get_table_names():
                self._service_schema_checked = True
                return

            existing_columns = {column['name'] for column in inspector.get_columns('service_appointments')}

            with self.engine.begin() as connection:
                for column_name, column_type in CANONICAL_APPOINTMENT_COLUMN_TYPES.items():
                    if column_name not in existing_columns:
                        connection.execute(
                            text(f'ALTER TABLE service_appointments ADD COLUMN {column_name} {column_type}')
                        )

                for canonical, legacy in LEGACY_APPOINTMENT_COLUMNS.items():
                    if legacy in existing_columns:
                        connection.execute(
                            text(
                                f'UPDATE service_appointments SET {canonical} = COALESCE({canonical}, {legacy}) '
                                f'WHERE {canonical} IS NULL'
                            )
                        )

                connection.execute(
                    text(
                        'CREATE INDEX IF NOT EXISTS idx_service_appointments_site_start '
                        'ON service_appointments(site_id, scheduled_start)'
                    )
                )
                connection.execute(
                    text(
                        'CREATE INDEX IF NOT EXISTS idx_service_appointments_site_status '
                        'ON service_appointments(site_id, status)'
                    )
                )

            self._service_schema_checked = True

    def booking_lock(self, site_id: int, day: date) -> Lock:
        """Lock serialising the capacity check and insert for one site and day."""
        with self._booking_locks_guard:
            return self._booking_locks.setdefault((site_id, day), Lock())

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
