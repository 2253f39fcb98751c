"""Project workflow controller: step guards and finish condition."""

import pytest

from protoplan.models.project import Project
from protoplan.models.screen import PlanStatus, Screen
from protoplan.models.user import User
from protoplan.services import workflow
from protoplan.services.screens import WorkflowError


@pytest.fixture
def project_row(db_session):
    user = User(username="owner", email="owner@example.com", hashed_password="x$y")
    db_session.add(user)
    db_session.commit()
    p = Project(name="Prototype", owner_id=user.id)
    db_session.add(p)
    db_session.commit()
    return p


def _add_screen(db, project, documentation=None, status=PlanStatus.NOT_GENERATED, plan=None):
    s = Screen(project_id=project.id, image_path=f"{project.id}/x.png",
               documentation=documentation, plan_status=status, implementation_plan=plan)
    db.add(s)
    db.commit()
    db.refresh(project)
    return s


def test_new_project_starts_at_upload(project_row):
    state = workflow.get_state(project_row)
    assert state.current_step == workflow.UPLOAD_STEP
    assert [s.state for s in state.steps] == ["current", "upcoming", "upcoming"]
    assert [s.name for s in state.steps] == ["Upload Screens", "Add Documentation", "Create Implementation Plans"]
    assert state.screen_count == 0
    assert not state.can_advance
    assert not state.can_finish


def test_cannot_leave_upload_without_screens(db_session, project_row):
    with pytest.raises(WorkflowError, match="at least one screen"):
        workflow.advance(db_session, project_row)
    assert project_row.workflow_step == workflow.UPLOAD_STEP


def test_cannot_leave_documentation_until_all_documented(db_session, project_row):
    _add_screen(db_session, project_row, documentation="done")
    undocumented = _add_screen(db_session, project_row)
    workflow.advance(db_session, project_row)
    assert project_row.workflow_step == workflow.DOCUMENTATION_STEP

    with pytest.raises(WorkflowError, match="documentation for all screens"):
        workflow.advance(db_session, project_row)

    undocumented.documentation = "now documented"
    db_session.commit()
    workflow.advance(db_session, project_row)
    state = workflow.get_state(project_row)
    assert state.current_step == workflow.PLANS_STEP
    assert [s.state for s in state.steps] == ["complete", "complete", "current"]
    assert state.documented_count == 2


def test_cannot_advance_past_last_step(db_session, project_row):
    _add_screen(db_session, project_row, documentation="d")
    project_row.workflow_step = workflow.PLANS_STEP
    db_session.commit()
    with pytest.raises(WorkflowError):
        workflow.advance(db_session, project_row)


def test_previous_stops_at_first_step(db_session, project_row):
    _add_screen(db_session, project_row, documentation="d")
    workflow.advance(db_session, project_row)
    workflow.go_back(db_session, project_row)
    assert project_row.workflow_step == workflow.UPLOAD_STEP
    with pytest.raises(WorkflowError, match="first step"):
        workflow.go_back(db_session, project_row)


def test_finish_requires_every_plan_completed(db_session, project_row):
    project_row.workflow_step = workflow.PLANS_STEP
    _add_screen(db_session, project_row, documentation="a", status=PlanStatus.COMPLETED, plan="# a")
    pending = _add_screen(db_session, project_row, documentation="b", status=PlanStatus.IN_PROGRESS)

    state = workflow.get_state(project_row)
    assert state.completed_count == 1
    assert not state.can_finish
    assert [s.can_generate_plan for s in state.screens] == [True, False]
    with pytest.raises(WorkflowError):
        workflow.finish(db_session, project_row)

    pending.plan_status = PlanStatus.COMPLETED
    pending.implementation_plan = "# b"
    db_session.commit()
    db_session.refresh(project_row)

    assert workflow.get_state(project_row).can_finish
    workflow.finish(db_session, project_row)
    assert project_row.finished_at is not None
    assert project_row.workflow_step == workflow.PLANS_STEP


def test_finish_refused_for_empty_project(db_session, project_row):
    with pytest.raises(WorkflowError):
        workflow.finish(db_session, project_row)


def test_finish_only_from_plans_step(db_session, project_row):
    _add_screen(db_session, project_row, documentation="a", status=PlanStatus.COMPLETED, plan="# a")

    assert not workflow.get_state(project_row).can_finish
    with pytest.raises(WorkflowError, match="implementation plans step"):
        workflow.finish(db_session, project_row)
    assert project_row.workflow_step == workflow.UPLOAD_STEP
    assert project_row.finished_at is None

    project_row.workflow_step = workflow.PLANS_STEP
    db_session.commit()
    assert workflow.get_state(project_row).can_finish
    workflow.finish(db_session, project_row)
    assert project_row.finished_at is not None
