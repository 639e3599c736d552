"""
Test Site Snapshots and the CLI

Verifies snapshot validation, collaborator building and the command line
entry point.
"""

import pytest

from content_access import StatusFlag, TemplateFlag
from content_access.__main__ import main, EXIT_ALLOW, EXIT_DENY, EXIT_ERROR
from content_access.core.errors import SnapshotError
from content_access.snapshot import build_snapshot, load_snapshot

SITE_YAML = """
config:
  tree:
    root_id: 1
    accounts_container_id: 29
permissions:
  - {id: 1, name: page-view}
  - {id: 2, name: page-edit}
  - {id: 3, name: page-add}
  - {id: 4, name: page-create}
  - {id: 5, name: page-move}
  - {id: 6, name: page-publish}
roles:
  - name: guest
    permissions: [page-view]
  - name: editor
    permissions: [page-view, page-edit, page-add, page-create, page-move]
    template_scopes:
      page-create: [3]
templates:
  - {id: 1, name: home}
  - {id: 2, name: basic-page}
  - {id: 3, name: post, parent_templates: [4], flags: [no-children]}
  - {id: 4, name: blog, child_templates: [3]}
  - {id: 5, name: user, flags: [no-move]}
principals:
  - {id: root, superuser: true}
  - {id: guest, guest: true, roles: [guest]}
  - {id: ada, roles: [guest, editor]}
resources:
  - {id: 1003, name: hello, template: 3, parent: 1002}
  - {id: 1002, name: blog, template: 4, parent: 1}
  - {id: 1, name: home, template: 1}
  - {id: 1004, name: draft, template: 2, parent: 1, status: [unpublished]}
  - {id: 29, name: users, template: 2, parent: 1}
  - id: 40
    name: ada
    template: 5
    parent: 29
    account: {principal: ada, roles: [editor]}
"""


@pytest.fixture
def site_file(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text(SITE_YAML)
    return path


class TestSnapshot:
    """Building collaborators from a snapshot"""

    def test_load(self, site_file):
        """All sections are built and linked"""
        snapshot = load_snapshot(site_file)

        assert len(snapshot.templates) == 5
        assert snapshot.catalog.exists("page-publish")
        assert snapshot.templates.get(3).has_flag(TemplateFlag.NO_CHILDREN)

        post = snapshot.resource(1003)
        assert post.parent.id == 1002
        assert post.parent.parent.id == 1
        assert snapshot.resource(1004).has_status(StatusFlag.UNPUBLISHED)
        assert snapshot.resource(40).is_account
        assert snapshot.principal("root").is_superuser
        assert snapshot.config.tree.accounts_container_id == 29

    def test_engine_decisions(self, site_file):
        """The built engine decides against the snapshot"""
        snapshot = load_snapshot(site_file)
        engine = snapshot.engine()
        ada = snapshot.principal("ada")

        # publish workflow installed, ada lacks page-publish
        assert not engine.is_editable(snapshot.resource(1002), ada)
        assert engine.is_editable(snapshot.resource(1004), ada)
        assert engine.is_addable(snapshot.resource(1002), ada)
        assert not engine.is_addable(snapshot.resource(1004), ada)
        assert not engine.is_moveable(snapshot.resource(1), snapshot.principal("root"))

    def test_unknown_role(self):
        """Principals must reference declared roles"""
        with pytest.raises(SnapshotError):
            build_snapshot({"principals": [{"id": "x", "roles": ["ghost"]}]})

    def test_unknown_parent(self):
        """Resources must reference declared parents"""
        with pytest.raises(SnapshotError):
            build_snapshot({
                "templates": [{"id": 1, "name": "home"}],
                "resources": [{"id": 2, "template": 1, "parent": 99}],
            })

    def test_unknown_template(self):
        """Resources must reference declared templates"""
        with pytest.raises(SnapshotError):
            build_snapshot({"resources": [{"id": 1, "template": 7}]})

    def test_parent_cycle(self):
        """Cyclic parents are rejected"""
        with pytest.raises(SnapshotError):
            build_snapshot({
                "templates": [{"id": 1, "name": "home"}],
                "resources": [
                    {"id": 2, "template": 1, "parent": 3},
                    {"id": 3, "template": 1, "parent": 2},
                ],
            })

    def test_unknown_status_flag(self):
        """Status names are validated"""
        with pytest.raises(SnapshotError):
            build_snapshot({
                "templates": [{"id": 1, "name": "home"}],
                "resources": [{"id": 1, "template": 1, "status": ["archived"]}],
            })

    def test_schema_violation(self):
        """Wrong types fail validation"""
        with pytest.raises(SnapshotError):
            build_snapshot({"templates": [{"id": "one"}]})

    def test_unknown_lookup(self, site_file):
        """Lookups of undeclared ids raise"""
        snapshot = load_snapshot(site_file)
        with pytest.raises(SnapshotError):
            snapshot.principal("nobody")
        with pytest.raises(SnapshotError):
            snapshot.resource(12345)


class TestCli:
    """python -m content_access"""

    def test_allow(self, site_file, capsys):
        """Allowed decisions print allow and exit 0"""
        code = main(["--snapshot", str(site_file), "--principal", "ada", "edit", "1004"])
        assert code == EXIT_ALLOW
        assert capsys.readouterr().out.strip() == "allow"

    def test_deny(self, site_file, capsys):
        """Denied decisions print deny and exit 1"""
        code = main(["--snapshot", str(site_file), "--principal", "ada", "edit", "1002"])
        assert code == EXIT_DENY
        assert capsys.readouterr().out.strip() == "deny"

    def test_field_and_target(self, site_file):
        """--field and --target feed the capability argument"""
        args = ["--snapshot", str(site_file), "--principal", "root"]
        assert main(args + ["edit-field", "40", "--field", "parent"]) == EXIT_DENY
        assert main(args + ["move", "1004", "--target", "1002"]) == EXIT_DENY
        assert main(args + ["move", "1003", "--target", "1002"]) == EXIT_ALLOW

    def test_view_as(self, site_file):
        """--as evaluates view for another principal"""
        args = ["--snapshot", str(site_file), "--principal", "ada", "view", "1004"]
        assert main(args) == EXIT_ALLOW
        assert main(args + ["--as", "guest"]) == EXIT_DENY

    def test_unknown_principal(self, site_file, capsys):
        """Snapshot errors exit 2"""
        code = main(["--snapshot", str(site_file), "--principal", "nobody", "view", "1"])
        assert code == EXIT_ERROR
        assert "nobody" in capsys.readouterr().err

    def test_invalid_config_value(self, site_file, tmp_path, capsys):
        """Badly typed config values exit 2"""
        config_file = tmp_path / "access.yaml"
        config_file.write_text("tree:\n  root_id: abc\n")

        code = main([
            "--snapshot", str(site_file), "--principal", "ada",
            "--config", str(config_file), "edit", "1004",
        ])
        assert code == EXIT_ERROR
        assert "error:" in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
