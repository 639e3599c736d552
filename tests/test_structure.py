"""
Test Structural Capabilities

Verifies moving, sorting, deleting and publishing.
"""

import pytest

from builders import Site, T_BLOG, T_USER
from content_access import AccountDetails, ResourceKind


class TestMoveability:
    """Moving resources"""

    def setup_method(self):
        """Setup for each test"""
        self.site = Site()
        self.engine = self.site.engine

    def test_root_never_moveable(self):
        """The tree root stays put, even for superusers"""
        assert not self.engine.is_moveable(self.site.home, self.site.superuser)
        assert not self.engine.is_moveable(self.site.home, self.site.superuser, self.site.about)

    def test_editor_moves_with_move_permission(self):
        """Move permission makes the parent field editable"""
        assert self.engine.is_moveable(self.site.about, self.site.editor)
        assert not self.engine.is_moveable(self.site.about, self.site.principal_with("page-edit"))

    def test_no_move_template(self):
        """no-move templates cannot change parent"""
        assert not self.engine.is_moveable(self.site.ada_account, self.site.superuser)

    def test_destination_must_accept_resource(self):
        """The destination's allowed-child list applies to the moved resource"""
        assert not self.engine.is_moveable(self.site.about, self.site.editor, self.site.blog)
        assert self.engine.is_moveable(self.site.post, self.site.editor, self.site.blog)

    def test_destination_without_children(self):
        """Nothing moves under a no-children parent"""
        assert not self.engine.is_moveable(self.site.about, self.site.superuser, self.site.post)

    def test_destination_needs_add_permission(self):
        """Moving needs add rights on the destination"""
        mover = self.site.principal_with("page-edit", "page-move")
        assert mover.has_permission("page-move", self.site.about)
        assert not self.engine.is_moveable(self.site.about, mover, self.site.draft)


class TestSortability:
    """Reordering siblings"""

    def setup_method(self):
        """Setup for each test"""
        self.site = Site()
        self.engine = self.site.engine

    @pytest.mark.parametrize("who", ["superuser", "editor", "guest", "user_admin"])
    def test_root_never_sortable(self, who):
        """The root has no siblings to sort among"""
        assert not self.engine.is_sortable(self.site.home, getattr(self.site, who))

    def test_editor_sorts_with_sort_permission(self):
        """Edit plus sort on the parent"""
        assert self.engine.is_sortable(self.site.about, self.site.editor)
        assert not self.engine.is_sortable(self.site.about, self.site.principal_with("page-edit"))

    def test_sort_permission_checked_on_parent(self):
        """Sort permission scoped to the parent's access template"""
        blog_sorter = self.site.principal_with("page-edit", "page-sort", scopes={"page-sort": [T_BLOG]})
        assert self.engine.is_sortable(self.site.post, blog_sorter)
        assert not self.engine.is_sortable(self.site.about, blog_sorter)

    def test_sort_requires_edit(self):
        """Sorting a resource needs it to be editable"""
        assert not self.engine.is_sortable(self.site.locked, self.site.editor)


class TestDeletability:
    """Deleting resources"""

    def setup_method(self):
        """Setup for each test"""
        self.site = Site()
        self.engine = self.site.engine

    def test_protected_branches_not_deletable(self):
        """Root, system resources, trash and accounts container are protected"""
        for resource in (self.site.home, self.site.admin, self.site.trash, self.site.users, self.site.not_found):
            assert not self.engine.is_deletable(resource, self.site.superuser)

    def test_superuser_deletes_ordinary_resource(self):
        """Superusers delete anything structurally deletable"""
        assert self.engine.is_deletable(self.site.about, self.site.superuser)
        assert self.engine.is_deletable(self.site.ada_account, self.site.superuser)

    def test_editor_needs_delete_permission(self):
        """Edit and delete permissions are both required"""
        assert self.engine.is_deletable(self.site.about, self.site.editor)
        assert not self.engine.is_deletable(self.site.about, self.site.principal_with("page-edit"))
        assert not self.engine.is_deletable(self.site.about, self.site.principal_with("page-delete"))

    def test_nobody_deletes_own_account(self):
        """Own account is never deletable, superusers included"""
        assert not self.engine.is_deletable(self.site.root_account, self.site.superuser)
        assert not self.engine.is_deletable(self.site.ada_account, self.site.editor)

    def test_superuser_account_needs_superuser(self):
        """Only superusers delete superuser accounts"""
        account_admin = self.site.principal_with("user-admin", "page-delete", principal_id="uma")
        assert self.engine.is_deletable(self.site.ada_account, account_admin)
        assert not self.engine.is_deletable(self.site.root_account, account_admin)

        other_root = self.site.add(
            42, T_USER, self.site.users, name="zed", kind=ResourceKind.ACCOUNT,
            account=AccountDetails(principal_id="zed", roles=frozenset({"superuser"})),
        )
        assert self.engine.is_deletable(other_root, self.site.superuser)


class TestPublishability:
    """Publishing"""

    def test_without_workflow_editors_publish(self):
        """No publish permission installed: edit is enough"""
        site = Site()
        assert site.engine.is_publishable(site.about, site.editor)
        assert site.engine.is_publishable(site.draft, site.editor)
        assert not site.engine.is_publishable(site.about, site.viewer)

    def test_with_workflow_publish_permission_required(self):
        """Publish permission installed: it is required"""
        site = Site(publish_workflow=True)
        assert not site.engine.is_publishable(site.draft, site.editor)
        assert not site.engine.is_publishable(site.about, site.editor)
        assert site.engine.is_publishable(site.about, site.publisher)
        assert site.engine.is_publishable(site.draft, site.publisher)

    def test_superuser_publishes(self):
        """Superusers publish regardless of the workflow"""
        site = Site(publish_workflow=True)
        assert site.engine.is_publishable(site.admin, site.superuser)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
