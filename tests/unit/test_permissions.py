"""
Unit tests for the access control evaluator.

The evaluator is pure, so these tests use plain stand-ins for users and
projects instead of database rows.
"""

import uuid
from types import SimpleNamespace

import pytest

from app.core.permissions import (
    Action,
    CommentResource,
    MemberResource,
    ProjectResource,
    authorize,
    is_admin,
    require,
)
from app.exceptions.base import AppPermissionError
from app.exceptions.project import ProjectPermissionError


def make_actor(role="user"):
    return SimpleNamespace(id=uuid.uuid4(), role=role)


@pytest.fixture
def owner():
    return make_actor()


@pytest.fixture
def member():
    return make_actor()


@pytest.fixture
def outsider():
    return make_actor()


@pytest.fixture
def admin():
    return make_actor(role="admin")


@pytest.fixture
def project(owner, member):
    return ProjectResource(project_id=uuid.uuid4(), owner_id=owner.id, member_ids=frozenset({member.id}))


class TestProjectActions:
    @pytest.mark.parametrize(
        "action",
        [Action.project_view, Action.project_edit, Action.member_add, Action.activity_view],
    )
    def test_owner_and_member_allowed(self, owner, member, project, action):
        assert authorize(owner, action, project)
        assert authorize(member, action, project)

    def test_outsider_denied_with_reason(self, outsider, project):
        decision = authorize(outsider, Action.project_view, project)

        assert not decision
        assert decision.reason == "Access denied. You are not a member of this project"

    def test_owner_is_member_without_explicit_membership(self, owner):
        project = ProjectResource(project_id=uuid.uuid4(), owner_id=owner.id)

        assert authorize(owner, Action.task_create, project)

    def test_delete_requires_owner(self, owner, member, project):
        assert authorize(owner, Action.project_delete, project)

        decision = authorize(member, Action.project_delete, project)
        assert not decision
        assert decision.reason == "Only project owner can delete the project"

    def test_admin_bypasses_membership(self, admin, project):
        for action in (Action.project_view, Action.project_delete, Action.task_delete):
            assert authorize(admin, action, project)


class TestTaskActions:
    @pytest.mark.parametrize(
        "action",
        [
            Action.task_view,
            Action.task_create,
            Action.task_edit,
            Action.task_delete,
            Action.attachment_upload,
            Action.attachment_delete,
        ],
    )
    def test_task_actions_follow_project_membership(self, member, outsider, project, action):
        assert authorize(member, action, project)
        assert not authorize(outsider, action, project)


class TestMemberRemoval:
    def test_member_can_remove_other_member(self, owner, member, project):
        resource = MemberResource(project=project, target_user_id=member.id)

        assert authorize(owner, Action.member_remove, resource)

    def test_owner_cannot_be_removed_even_by_admin(self, owner, admin, project):
        resource = MemberResource(project=project, target_user_id=owner.id)

        for actor in (owner, admin):
            decision = authorize(actor, Action.member_remove, resource)
            assert not decision
            assert decision.reason == "Cannot remove project owner"


class TestCommentActions:
    def test_only_author_edits(self, owner, member, project):
        comment = CommentResource(author_id=member.id, project=project)

        assert authorize(member, Action.comment_edit, comment)
        decision = authorize(owner, Action.comment_edit, comment)
        assert not decision
        assert decision.reason == "You can only edit your own comments"

    def test_author_or_project_owner_deletes(self, owner, member, project):
        other_member = make_actor()
        shared = ProjectResource(
            project_id=project.project_id,
            owner_id=owner.id,
            member_ids=frozenset({member.id, other_member.id}),
        )
        comment = CommentResource(author_id=member.id, project=shared)

        assert authorize(member, Action.comment_delete, comment)
        assert authorize(owner, Action.comment_delete, comment)
        assert not authorize(other_member, Action.comment_delete, comment)

    def test_admin_may_edit_and_delete_any_comment(self, admin, member, project):
        comment = CommentResource(author_id=member.id, project=project)

        assert authorize(admin, Action.comment_edit, comment)
        assert authorize(admin, Action.comment_delete, comment)

    def test_comment_action_needs_comment_resource(self, member, project):
        with pytest.raises(TypeError):
            authorize(member, Action.comment_edit, project)


class TestRequire:
    def test_require_raises_given_error_class(self, outsider, project):
        with pytest.raises(ProjectPermissionError) as exc_info:
            require(outsider, Action.project_view, project, ProjectPermissionError)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Access denied. You are not a member of this project"

    def test_require_defaults_to_permission_error(self, member, project):
        with pytest.raises(AppPermissionError):
            require(member, Action.project_delete, project)

    def test_require_passes_silently_when_allowed(self, owner, project):
        require(owner, Action.project_delete, project)

    def test_is_admin(self, admin, member):
        assert is_admin(admin)
        assert not is_admin(member)
