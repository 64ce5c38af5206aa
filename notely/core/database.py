from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from notely.core.config import settings


def build_engine(url: str):
    # SQLite: la session peut changer de thread (TestClient, verrous par parent)
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Dépendance session DB, fermée après la requête"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
