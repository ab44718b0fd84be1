"""
Database initialization and connection management
"""
import logging
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from config import DATABASE_URL

logger = logging.getLogger(__name__)


def _engine_options(url):
    # SQLite connections are shared with job-queue threads; in-memory needs one connection
    if url.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in url or url in ('sqlite://', 'sqlite:///'):
            options['poolclass'] = StaticPool
        return options
    return {'pool_pre_ping': True}


# Create engine
engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Create base class for models
Base = declarative_base()


def create_session():
    """Create a new database session

    Handlers run concurrently on one event loop thread, so each call gets its
    own session.
    """
    return SessionLocal()


def dispose_engine():
    """Close pooled database connections on shutdown"""
    engine.dispose()
    logger.info("🔌 Database connections closed")


def init_db():
    """Create all tables that do not exist yet"""
    try:
        # Import all models to ensure they're registered
        from database import models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info(f"✅ Database tables ready: {', '.join(sorted(Base.metadata.tables))}")
        return True
    except Exception as e:
        logger.error(f"❌ Error creating database tables: {e}", exc_info=True)
        return False


def test_connection():
    """Test database connection"""
    db = create_session()
    try:
        result = db.execute(text("SELECT 1 AS test")).fetchone()
        return result.test == 1
    except Exception as e:
        logger.error(f"❌ Database connection test failed: {e}")
        return False
    finally:
        db.close()
