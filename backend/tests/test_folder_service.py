"""Unit tests for FolderService and the tree helpers it is built on.

Service methods are called directly on the test session, bypassing HTTP.
"""

import pytest

from photovault.exceptions import FolderNotFoundError
from photovault.schemas.folder import FolderCreate, FolderUpdate
from photovault.services.folder_service import (
    FolderService,
    breadcrumb_chain,
    descendant_closure,
    index_forest,
)


class TestTreeHelpers:

    def test_closure_of_leaf_is_itself(self):
        assert descendant_closure({}, [5]) == {5}

    def test_closure_of_deep_chain(self):
        # 0 -> 1 -> 2 -> ... -> 4999; deeper than any recursion limit
        children = {i: [i + 1] for i in range(4999)}
        closure = descendant_closure(children, [0])
        assert len(closure) == 5000

    def test_closure_of_several_roots_is_union(self):
        children = {1: [2, 3], 3: [4], 10: [11]}
        assert descendant_closure(children, [3, 10]) == {3, 4, 10, 11}

    def test_breadcrumbs_root_first(self):
        index, _ = index_forest([(1, None, "admin"), (2, 1, "admin_1"), (3, 2, "admin_1_1")])
        chain = breadcrumb_chain(index, 3)
        assert [(b.id, b.name) for b in chain] == [(1, "admin"), (2, "admin_1"), (3, "admin_1_1")]

    def test_breadcrumbs_of_root(self):
        index, _ = index_forest([(1, None, "admin")])
        assert [b.name for b in breadcrumb_chain(index, 1)] == ["admin"]

    def test_breadcrumbs_stop_on_cycle(self):
        index, _ = index_forest([(1, 2, "a"), (2, 1, "b")])
        chain = breadcrumb_chain(index, 1)
        assert len(chain) == 2


class TestCreateAndUpdate:

    def test_create_under_owned_parent(self, db, make_user):
        user, _ = make_user("admin")
        folder = FolderService(db).create_folder(
            user.id, FolderCreate(name="admin_1", parent_id=user.root_folder_id)
        )
        assert folder.parent_id == user.root_folder_id
        assert folder.user_id == user.id

    def test_create_under_foreign_parent_raises(self, db, make_user):
        owner, _ = make_user("owner")
        other, _ = make_user("other")
        with pytest.raises(FolderNotFoundError):
            FolderService(db).create_folder(
                other.id, FolderCreate(name="sneaky", parent_id=owner.root_folder_id)
            )

    def test_update_renames(self, db, make_user, make_folder):
        user, _ = make_user("admin")
        folder = make_folder(user, "old", parent_id=user.root_folder_id)
        updated = FolderService(db).update_folder(
            user.id, FolderUpdate(folder_id=folder.id, name="new", description="desc")
        )
        assert updated.name == "new"
        assert updated.description == "desc"

    def test_update_foreign_folder_raises(self, db, make_user, make_folder):
        owner, _ = make_user("owner")
        other, _ = make_user("other")
        folder = make_folder(owner, "mine", parent_id=owner.root_folder_id)
        with pytest.raises(FolderNotFoundError):
            FolderService(db).update_folder(other.id, FolderUpdate(folder_id=folder.id, name="x"))


class TestFolderContents:

    def test_breadcrumbs_through_service(self, db, make_user, make_folder):
        user, _ = make_user("admin")
        level1 = make_folder(user, "admin_1", parent_id=user.root_folder_id)
        level2 = make_folder(user, "admin_1_1", parent_id=level1.id)

        crumbs = FolderService(db).get_breadcrumbs(user.id, level2.id)
        assert [c.name for c in crumbs] == ["admin", "admin_1", "admin_1_1"]

    def test_child_totals_cover_whole_subtree(self, db, make_user, make_folder, make_photo):
        user, _ = make_user("admin")
        level1 = make_folder(user, "admin_1", parent_id=user.root_folder_id)
        level2 = make_folder(user, "admin_1_1", parent_id=level1.id)
        make_photo(user, level1.id, "a.jpg", size=100)
        make_photo(user, level2.id, "b.jpg", size=50)
        make_photo(user, user.root_folder_id, "root.jpg", size=7)

        contents = FolderService(db).get_folder_contents(user.id, user.root_folder_id)

        assert [p.name for p in contents.photos] == ["root.jpg"]
        assert len(contents.child_folders) == 1
        child = contents.child_folders[0]
        assert child.id == level1.id
        assert child.total_photo_count == 2
        assert child.total_size_in_bytes == 150

    def test_empty_child_has_zero_totals(self, db, make_user, make_folder):
        user, _ = make_user("admin")
        make_folder(user, "empty", parent_id=user.root_folder_id)
        contents = FolderService(db).get_folder_contents(user.id, user.root_folder_id)
        assert contents.child_folders[0].total_photo_count == 0
        assert contents.child_folders[0].total_size_in_bytes == 0

    def test_foreign_folder_is_not_found(self, db, make_user):
        owner, _ = make_user("owner")
        other, _ = make_user("other")
        with pytest.raises(FolderNotFoundError):
            FolderService(db).get_folder_contents(other.id, owner.root_folder_id)

    def test_missing_folder_is_not_found(self, db, make_user):
        user, _ = make_user("admin")
        with pytest.raises(FolderNotFoundError):
            FolderService(db).get_folder_contents(user.id, 987654)

    def test_descendant_ids(self, db, make_user, make_folder):
        user, _ = make_user("admin")
        a = make_folder(user, "a", parent_id=user.root_folder_id)
        b = make_folder(user, "b", parent_id=a.id)
        c = make_folder(user, "c", parent_id=user.root_folder_id)
        assert FolderService(db).descendant_ids(user.id, [a.id]) == {a.id, b.id}
        assert FolderService(db).descendant_ids(user.id, [user.root_folder_id]) == {
            user.root_folder_id, a.id, b.id, c.id,
        }

    def test_descendant_ids_rejects_foreign_start(self, db, make_user, make_folder):
        user, _ = make_user("admin")
        other, _ = make_user("other")
        theirs = make_folder(other, "theirs", parent_id=other.root_folder_id)
        with pytest.raises(FolderNotFoundError):
            FolderService(db).descendant_ids(user.id, [theirs.id, other.root_folder_id])

    def test_descendant_ids_rejects_mixed_start(self, db, make_user):
        user, _ = make_user("admin")
        other, _ = make_user("other")
        with pytest.raises(FolderNotFoundError):
            FolderService(db).descendant_ids(user.id, [user.root_folder_id, other.root_folder_id])
