"""
Test data factories for generating test objects.

Factories only build instances; tests add them to the async session
themselves.
"""

import factory
from factory.alchemy import SQLAlchemyModelFactory

from app.core.security import hash_password
from models import Comment, Project, Task, TaskAttachment, User
from models.base import utcnow

TEST_PASSWORD = "password123"
# Hashing is slow on purpose, so every user shares one hash
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


class UserFactory(SQLAlchemyModelFactory):
    """Factory for creating User test instances."""

    class Meta:
        model = User
        sqlalchemy_session = None

    name = factory.Faker("name")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    password_hash = TEST_PASSWORD_HASH
    role = "user"


class ProjectFactory(SQLAlchemyModelFactory):
    """Factory for creating Project test instances."""

    class Meta:
        model = Project
        sqlalchemy_session = None

    name = factory.Sequence(lambda n: f"Test Project {n}")
    description = factory.Faker("text", max_nb_chars=200)
    color = "#3B82F6"
    # owner_id will be passed when building the project


class TaskFactory(SQLAlchemyModelFactory):
    """Factory for creating Task test instances."""

    class Meta:
        model = Task
        sqlalchemy_session = None

    title = factory.Sequence(lambda n: f"Test Task {n}")
    description = factory.Faker("text", max_nb_chars=300)
    status = "To Do"
    priority = "Medium"
    position = 0
    # project_id and created_by_id will be passed when building


class AttachmentFactory(SQLAlchemyModelFactory):
    """Factory for creating TaskAttachment test instances."""

    class Meta:
        model = TaskAttachment
        sqlalchemy_session = None

    filename = factory.Sequence(lambda n: f"file-{n}.pdf")
    original_name = "report.pdf"
    key = factory.LazyAttribute(lambda obj: f"attachments/{obj.filename}")
    url = factory.LazyAttribute(lambda obj: f"https://files.example.com/{obj.key}")
    size = 1024
    content_type = "application/pdf"
    uploaded_at = factory.LazyFunction(utcnow)


class CommentFactory(SQLAlchemyModelFactory):
    """Factory for creating Comment test instances."""

    class Meta:
        model = Comment
        sqlalchemy_session = None

    content = factory.Faker("sentence")
