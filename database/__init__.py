# database/__init__.py
"""
Database package initialization
"""

from .db import (
    Base,
    engine,
    SessionLocal,
    create_session,
    dispose_engine,
    init_db,
)

from .models import (
    User,
    Service,
    Order,
    OrderFile,
    Review,
    UserRole,
    OrderStatus,
    FileKind,
)

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'create_session',
    'dispose_engine',
    'init_db',
    'User',
    'Service',
    'Order',
    'OrderFile',
    'Review',
    'UserRole',
    'OrderStatus',
    'FileKind',
]
