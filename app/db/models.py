"""Declarative base shared by every ORM model"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# ORM model classes live in infrastructure/orm/ and register themselves on this Base
# when app.infrastructure.orm is imported.
