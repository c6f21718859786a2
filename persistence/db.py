from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def make_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        # For SQLite, check_same_thread=False is required for multithreaded web servers
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db(engine):
    # The bookings table is owned by the booking frontend's backend; this is for
    # local development and tests only.
    import persistence.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
