"""LocationTree against a real (SQLite) database"""

from datetime import datetime

import pytest
from freezegun import freeze_time
from sqlalchemy import select

from boxtrack.domain.exceptions import (CycleDetectedException,
                                        DepthExceededException,
                                        LocationNameConflictException,
                                        LocationNotFoundException,
                                        ValidationException,
                                        WorkspaceMismatchException)
from boxtrack.infrastructure.persistence.models import Container, Location
from boxtrack.presentation.api.dependencies import build_location_tree

FROZEN_TIME = "2026-01-15 09:30:00"


async def build_chain(tree, tenant_id: str, length: int, prefix: str = "Level") -> list[str]:
    """Create `length` nested locations and return their ids, root first"""
    ids: list[str] = []
    parent_id = None
    for level in range(1, length + 1):
        location = await tree.create(tenant_id, parent_id, f"{prefix} {level}")
        ids.append(location.id)
        parent_id = location.id
    return ids


async def fetch_location(test_db, location_id: str) -> Location:
    result = await test_db.execute(
        select(Location).where(Location.id == location_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestCreate:
    @pytest.mark.asyncio
    async def test_root_and_child_paths(self, location_tree, tenant_id):
        """
        GIVEN an empty tenant
        WHEN a root and a child are created
        THEN the child path extends the root path and depths are 1 and 2
        """
        root = await location_tree.create(tenant_id, None, "Garage")
        child = await location_tree.create(tenant_id, root.id, "Shelf A", "Left wall")

        assert root.depth == 1
        assert root.path == root.id
        assert root.parent_id is None
        assert child.depth == 2
        assert child.path == f"{root.id}.{child.id}"
        assert child.description == "Left wall"
        assert child.is_deleted is False

    @pytest.mark.asyncio
    async def test_depth_five_succeeds_and_six_fails(self, location_tree, tenant_id):
        ids = await build_chain(location_tree, tenant_id, 5)

        deepest = await location_tree.get(tenant_id, ids[-1])
        assert deepest.depth == 5

        with pytest.raises(DepthExceededException) as exc_info:
            await location_tree.create(tenant_id, ids[-1], "Too deep")

        assert exc_info.value.details["depth"] == 6
        assert exc_info.value.details["max_depth"] == 5

    @pytest.mark.asyncio
    async def test_parent_must_exist(self, location_tree, tenant_id):
        with pytest.raises(LocationNotFoundException):
            await location_tree.create(tenant_id, "missing", "Orphan")

    @pytest.mark.asyncio
    async def test_parent_in_other_tenant(self, location_tree, tenant_id, other_tenant_id):
        foreign = await location_tree.create(other_tenant_id, None, "Their garage")
        foreign_id = foreign.id

        with pytest.raises(WorkspaceMismatchException):
            await location_tree.create(tenant_id, foreign_id, "Sneaky")

    @pytest.mark.asyncio
    async def test_deleted_parent_is_rejected(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Attic")
        root_id = root.id
        await location_tree.soft_delete(tenant_id, root_id)

        with pytest.raises(LocationNotFoundException):
            await location_tree.create(tenant_id, root_id, "Beam")

    @pytest.mark.asyncio
    async def test_sibling_names_are_unique(self, location_tree, tenant_id):
        await location_tree.create(tenant_id, None, "Garage")

        with pytest.raises(LocationNameConflictException):
            await location_tree.create(tenant_id, None, "  garage ")

    @pytest.mark.asyncio
    async def test_same_name_allowed_under_different_parents(self, location_tree, tenant_id):
        a = await location_tree.create(tenant_id, None, "Garage")
        b = await location_tree.create(tenant_id, None, "Basement")

        await location_tree.create(tenant_id, a.id, "Shelf")
        await location_tree.create(tenant_id, b.id, "Shelf")

    @pytest.mark.asyncio
    async def test_same_name_allowed_in_other_tenant(self, location_tree, tenant_id, other_tenant_id):
        await location_tree.create(tenant_id, None, "Garage")
        await location_tree.create(other_tenant_id, None, "Garage")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "x" * 65])
    async def test_name_length(self, location_tree, tenant_id, name):
        with pytest.raises(ValidationException):
            await location_tree.create(tenant_id, None, name)


class TestRename:
    @pytest.mark.asyncio
    async def test_rename_keeps_path(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage")
        path = root.path

        renamed = await location_tree.rename(tenant_id, root.id, "Workshop")

        assert renamed.name == "Workshop"
        assert renamed.path == path

    @pytest.mark.asyncio
    async def test_rename_to_sibling_name_conflicts(self, location_tree, tenant_id):
        await location_tree.create(tenant_id, None, "Garage")
        attic = await location_tree.create(tenant_id, None, "Attic")

        with pytest.raises(LocationNameConflictException):
            await location_tree.rename(tenant_id, attic.id, "GARAGE")

    @pytest.mark.asyncio
    async def test_update_description_only(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage", "old")

        updated = await location_tree.update(tenant_id, root.id, {"description": "new"})

        assert updated.name == "Garage"
        assert updated.description == "new"

    @pytest.mark.asyncio
    async def test_unknown_fields_rejected(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage")

        with pytest.raises(ValidationException):
            await location_tree.update(tenant_id, root.id, {"parent_id": None})

    @pytest.mark.asyncio
    async def test_rename_in_other_tenant_is_not_found(self, location_tree, tenant_id, other_tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage")

        with pytest.raises(LocationNotFoundException):
            await location_tree.rename(other_tenant_id, root.id, "Mine now")


class TestMove:
    @pytest.mark.asyncio
    async def test_move_rewrites_subtree_paths(self, location_tree, test_db, tenant_id):
        """
        GIVEN Garage > Shelf > Bin and a separate root Basement
        WHEN Shelf is moved under Basement
        THEN Shelf and Bin paths start with Basement and parent pointers match
        """
        garage = await location_tree.create(tenant_id, None, "Garage")
        basement = await location_tree.create(tenant_id, None, "Basement")
        shelf = await location_tree.create(tenant_id, garage.id, "Shelf")
        bin_ = await location_tree.create(tenant_id, shelf.id, "Bin")

        moved = await location_tree.move(tenant_id, shelf.id, basement.id)

        assert moved.parent_id == basement.id
        assert moved.path == f"{basement.id}.{shelf.id}"
        refreshed_bin = await fetch_location(test_db, bin_.id)
        assert refreshed_bin.path == f"{basement.id}.{shelf.id}.{bin_.id}"
        assert refreshed_bin.parent_id == shelf.id

    @pytest.mark.asyncio
    async def test_move_to_root(self, location_tree, test_db, tenant_id):
        ids = await build_chain(location_tree, tenant_id, 3)

        moved = await location_tree.move(tenant_id, ids[1], None)

        assert moved.parent_id is None
        assert moved.depth == 1
        leaf = await fetch_location(test_db, ids[2])
        assert leaf.path == f"{ids[1]}.{ids[2]}"

    @pytest.mark.asyncio
    async def test_move_under_descendant_is_a_cycle(self, location_tree, tenant_id):
        basement = await location_tree.create(tenant_id, None, "Basement")
        shelf = await location_tree.create(tenant_id, basement.id, "Shelf")

        with pytest.raises(CycleDetectedException):
            await location_tree.move(tenant_id, basement.id, shelf.id)

    @pytest.mark.asyncio
    async def test_move_under_itself_is_a_cycle(self, location_tree, tenant_id):
        basement = await location_tree.create(tenant_id, None, "Basement")

        with pytest.raises(CycleDetectedException):
            await location_tree.move(tenant_id, basement.id, basement.id)

    @pytest.mark.asyncio
    async def test_move_accounts_for_subtree_height(self, location_tree, test_db, tenant_id):
        """
        GIVEN a chain of depth 3 and another chain of depth 3
        WHEN the first chain's root is moved under the other chain's leaf
        THEN the move is rejected (deepest node would reach depth 6) and nothing changes
        """
        first = await build_chain(location_tree, tenant_id, 3, prefix="A")
        second = await build_chain(location_tree, tenant_id, 3, prefix="B")

        with pytest.raises(DepthExceededException) as exc_info:
            await location_tree.move(tenant_id, first[0], second[-1])

        assert exc_info.value.details["depth"] == 6
        leaf = await fetch_location(test_db, first[-1])
        assert leaf.path == ".".join(first)
        root = await fetch_location(test_db, first[0])
        assert root.parent_id is None

    @pytest.mark.asyncio
    async def test_move_reaching_exactly_max_depth(self, location_tree, tenant_id):
        first = await build_chain(location_tree, tenant_id, 2, prefix="A")
        second = await build_chain(location_tree, tenant_id, 3, prefix="B")

        moved = await location_tree.move(tenant_id, first[0], second[-1])

        assert moved.depth == 4

    @pytest.mark.asyncio
    async def test_move_under_current_parent_is_noop(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage")
        shelf = await location_tree.create(tenant_id, root.id, "Shelf")
        path = shelf.path

        moved = await location_tree.move(tenant_id, shelf.id, root.id)

        assert moved.path == path

    @pytest.mark.asyncio
    async def test_move_into_name_clash(self, location_tree, tenant_id):
        a = await location_tree.create(tenant_id, None, "A")
        b = await location_tree.create(tenant_id, None, "B")
        await location_tree.create(tenant_id, a.id, "Shelf")
        shelf_b = await location_tree.create(tenant_id, b.id, "Shelf")

        with pytest.raises(LocationNameConflictException):
            await location_tree.move(tenant_id, shelf_b.id, a.id)

    @pytest.mark.asyncio
    async def test_move_to_other_tenant_parent(self, location_tree, tenant_id, other_tenant_id):
        mine = await location_tree.create(tenant_id, None, "Mine")
        theirs = await location_tree.create(other_tenant_id, None, "Theirs")
        mine_id, theirs_id = mine.id, theirs.id

        with pytest.raises(WorkspaceMismatchException):
            await location_tree.move(tenant_id, mine_id, theirs_id)

    @pytest.mark.asyncio
    async def test_move_rechecks_cycle_against_committed_parent(
        self, location_tree, session_factory, tenant_id
    ):
        """
        GIVEN two roots A and B, both loaded in this session
        WHEN another session moves B under A and commits
        THEN moving A under B here is detected as a cycle
        """
        a = await location_tree.create(tenant_id, None, "A")
        b = await location_tree.create(tenant_id, None, "B")
        a_id, b_id = a.id, b.id
        async with session_factory() as other:
            await build_location_tree(other).move(tenant_id, b_id, a_id)

        with pytest.raises(CycleDetectedException):
            await location_tree.move(tenant_id, a_id, b_id)

    @pytest.mark.asyncio
    async def test_move_under_parent_deleted_by_another_session(
        self, location_tree, session_factory, tenant_id
    ):
        a = await location_tree.create(tenant_id, None, "A")
        b = await location_tree.create(tenant_id, None, "B")
        a_id, b_id = a.id, b.id
        async with session_factory() as other:
            await build_location_tree(other).soft_delete(tenant_id, b_id)

        with pytest.raises(LocationNotFoundException):
            await location_tree.move(tenant_id, a_id, b_id)

    @pytest.mark.asyncio
    async def test_empty_parent_id_is_a_missing_reference(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Root")
        root_id = root.id

        with pytest.raises(LocationNotFoundException):
            await location_tree.create(tenant_id, "", "Orphan")
        with pytest.raises(LocationNotFoundException):
            await location_tree.move(tenant_id, root_id, "")


class TestSoftDelete:
    @pytest.mark.asyncio
    async def test_soft_delete_unassigns_direct_containers_only(
        self, location_tree, container_store, test_db, tenant_id
    ):
        """
        GIVEN Room > Shelf with a box in each
        WHEN Room is soft deleted
        THEN the Room box becomes unassigned, the Shelf box and Shelf row are untouched
        """
        room = await location_tree.create(tenant_id, None, "Room")
        shelf = await location_tree.create(tenant_id, room.id, "Shelf")
        room_box = await container_store.create(tenant_id, "Room box", location_id=room.id)
        shelf_box = await container_store.create(tenant_id, "Shelf box", location_id=shelf.id)
        shelf_path = shelf.path

        unassigned = await location_tree.soft_delete(tenant_id, room.id)

        assert unassigned == 1
        boxes = {
            c.id: c
            for c in (
                await test_db.execute(
                    select(Container).execution_options(populate_existing=True)
                )
            ).scalars()
        }
        assert boxes[room_box.id].location_id is None
        assert boxes[shelf_box.id].location_id == shelf.id

        deleted_room = await location_tree.get(tenant_id, room.id)
        assert deleted_room.is_deleted is True
        assert deleted_room.deleted_at is not None
        untouched_shelf = await fetch_location(test_db, shelf.id)
        assert untouched_shelf.is_deleted is False
        assert untouched_shelf.path == shelf_path

    @pytest.mark.asyncio
    async def test_deleted_location_leaves_active_listing(self, location_tree, tenant_id):
        attic = await location_tree.create(tenant_id, None, "Attic")
        await location_tree.create(tenant_id, None, "Garage")

        await location_tree.soft_delete(tenant_id, attic.id)

        names = [loc.name for loc in await location_tree.list_active(tenant_id)]
        assert names == ["Garage"]

    @pytest.mark.asyncio
    async def test_delete_twice_is_not_found(self, location_tree, tenant_id):
        attic = await location_tree.create(tenant_id, None, "Attic")
        attic_id = attic.id
        await location_tree.soft_delete(tenant_id, attic_id)

        with pytest.raises(LocationNotFoundException):
            await location_tree.soft_delete(tenant_id, attic_id)

    @pytest.mark.asyncio
    async def test_name_is_reusable_after_delete(self, location_tree, tenant_id):
        attic = await location_tree.create(tenant_id, None, "Attic")
        await location_tree.soft_delete(tenant_id, attic.id)

        again = await location_tree.create(tenant_id, None, "Attic")

        assert again.id != attic.id

    @pytest.mark.asyncio
    async def test_soft_delete_stamps_deleted_at(self, location_tree, tenant_id):
        attic = await location_tree.create(tenant_id, None, "Attic")
        attic_id = attic.id

        with freeze_time(FROZEN_TIME, real_asyncio=True):
            await location_tree.soft_delete(tenant_id, attic_id)

        deleted = await location_tree.get(tenant_id, attic_id)
        assert deleted.is_deleted is True
        assert deleted.deleted_at.replace(tzinfo=None) == datetime(2026, 1, 15, 9, 30)


class TestQueries:
    @pytest.mark.asyncio
    async def test_breadcrumb_root_first(self, location_tree, tenant_id):
        ids = await build_chain(location_tree, tenant_id, 3)

        crumbs = await location_tree.breadcrumb(tenant_id, ids[-1])

        assert [c.id for c in crumbs] == ids
        assert [c.name for c in crumbs] == ["Level 1", "Level 2", "Level 3"]

    @pytest.mark.asyncio
    async def test_breadcrumb_reflects_rename(self, location_tree, tenant_id):
        ids = await build_chain(location_tree, tenant_id, 2)
        await location_tree.rename(tenant_id, ids[0], "Renamed")

        crumbs = await location_tree.breadcrumb(tenant_id, ids[-1])

        assert crumbs[0].name == "Renamed"

    @pytest.mark.asyncio
    async def test_list_children_sorted_by_name(self, location_tree, tenant_id):
        root = await location_tree.create(tenant_id, None, "Garage")
        for name in ["Shelf C", "Shelf A", "Shelf B"]:
            await location_tree.create(tenant_id, root.id, name)

        children = await location_tree.list_children(tenant_id, root.id)
        roots = await location_tree.list_children(tenant_id, None)

        assert [c.name for c in children] == ["Shelf A", "Shelf B", "Shelf C"]
        assert [r.name for r in roots] == ["Garage"]

    @pytest.mark.asyncio
    async def test_list_children_of_unknown_parent(self, location_tree, tenant_id):
        with pytest.raises(LocationNotFoundException):
            await location_tree.list_children(tenant_id, "missing")

    @pytest.mark.asyncio
    async def test_listings_are_tenant_scoped(self, location_tree, tenant_id, other_tenant_id):
        await location_tree.create(tenant_id, None, "Mine")
        await location_tree.create(other_tenant_id, None, "Theirs")

        assert [loc.name for loc in await location_tree.list_active(tenant_id)] == ["Mine"]
        assert [loc.name for loc in await location_tree.list_active(other_tenant_id)] == ["Theirs"]
