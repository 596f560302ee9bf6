from __future__ import annotations

import pytest

from src.family_care.family_care.core.exceptions import NotFoundError, ValidationError


def test_tree_groups_families_by_team_in_display_order(container):
    org = container.organization_service
    dept = org.create_department({"name": "New Family"})
    team = org.create_team({"department_id": dept.id, "name": "Team 1"}, ["s1"])
    families = container.family_service
    a = families.create({"family_name": "A"}, [])
    b = families.create({"family_name": "B"}, [])
    families.create({"family_name": "Unassigned"}, [])

    families.reorder(team.id, [b.id, a.id])
    tree = org.tree()

    assert len(tree) == 1
    branch = tree[0].teams[0]
    assert branch.team.assigned_staff == ("s1",)
    assert [f.family_name for f in branch.families] == ["B", "A"]


def test_deleting_team_unassigns_its_families(container):
    org = container.organization_service
    dept = org.create_department({"name": "D"})
    team = org.create_team({"department_id": dept.id, "name": "T"})
    family = container.family_service.create({"family_name": "A", "team_id": team.id}, [])

    org.delete_team(team.id)

    assert container.family_service.get(family.id).team_id is None


def test_team_requires_existing_department(container):
    with pytest.raises(ValidationError):
        container.organization_service.create_team({"department_id": "missing", "name": "T"})


def test_ensure_department_and_team_are_idempotent(container):
    org = container.organization_service
    dept, created = org.ensure_department("Youth")
    again, created_again = org.ensure_department("Youth")
    team, team_created = org.ensure_team(dept.id, "Middle")
    _, team_created_again = org.ensure_team(dept.id, "Middle")

    assert (created, created_again) == (True, False)
    assert again.id == dept.id
    assert (team_created, team_created_again) == (True, False)
    assert team.department_id == dept.id


def test_update_missing_department(container):
    with pytest.raises(NotFoundError):
        container.organization_service.update_department("missing", {"name": "x"})
