"""Tests for instance enumeration and the host inventory."""
import pytest
from enc2dhcp.dhcp import Ensure, ChangeType, HostsFileCache
from enc2dhcp.enc import HostInventory, enumerate_instances


NODE1 = """\
hostname: node1.example.com
pxe:
  mac: AA:BB:CC:DD:EE:01
  ip: 10.0.0.1
  mac1: aa:bb:cc:dd:ee:11
  ip1: 10.0.1.1
"""

NODE2 = """\
mac: aa:bb:cc:dd:ee:02
ip: 10.0.0.2
"""


@pytest.fixture
def enc_dir(tmp_path):
    directory = tmp_path / "enc"
    directory.mkdir()
    (directory / "node1.example.com.yaml").write_text(NODE1)
    (directory / "node2.example.com.yml").write_text(NODE2)
    (directory / "bad_host.yaml").write_text("hostname: bad_host\n")
    (directory / "nopxe.example.com.yaml").write_text("classes: [base]\n")
    (directory / "README.txt").write_text("not an ENC file\n")
    return directory


class TestEnumerateInstances:
    """Tests for enumerate_instances."""

    def test_enumerate_order(self, enc_dir):
        """Primary records in file order, secondaries right after their host."""
        records = enumerate_instances(enc_dir)

        assert [r.name for r in records] == [
            "node1.example.com",
            "node1-eth1",
            "node2.example.com",
        ]

    def test_single_pxe_host_is_one_record(self, tmp_path):
        """A host with only a primary interface yields exactly one stanza."""
        (tmp_path / "node1.example.com.yaml").write_text(
            "hostname: node1.example.com\npxe:\n  mac: AA-BB-CC-DD-EE-FF\n  ip: 10.0.0.5\n"
        )

        records = enumerate_instances(tmp_path)

        assert [r.name for r in records] == ["node1.example.com"]
        assert records[0].content.count("host ") == 1

    def test_upper_case_extension_enumerated(self, tmp_path):
        (tmp_path / "node2.example.com.YAML").write_text(NODE2)

        records = enumerate_instances(tmp_path)

        assert [r.name for r in records] == ["node2.example.com"]

    def test_records_are_present(self, enc_dir):
        records = enumerate_instances(enc_dir)
        assert all(r.ensure == Ensure.PRESENT for r in records)
        assert all(r.content for r in records)

    def test_primary_fields(self, enc_dir):
        primary = enumerate_instances(enc_dir)[0]

        assert primary.to_dict() == {
            "mac": "aa:bb:cc:dd:ee:01",
            "ip": "10.0.0.1",
            "name": "node1.example.com",
            "hostname": "node1.example.com",
            "group": "pxe",
            "content": primary.content,
            "ensure": "present",
        }

    def test_invalid_hostname_skipped(self, tmp_path):
        """bad_host.yaml with an invalid hostname emits nothing."""
        (tmp_path / "bad_host.yaml").write_text(
            "hostname: bad_host\npxe:\n  mac: aa:bb:cc:dd:ee:ff\n  ip: 10.0.0.9\n"
        )

        assert enumerate_instances(tmp_path) == []

    def test_missing_directory(self, tmp_path):
        assert enumerate_instances(tmp_path / "missing") == []

    def test_bad_record_does_not_abort(self, tmp_path):
        (tmp_path / "a.example.com.yaml").write_text("pxe: [unclosed\n")
        (tmp_path / "b.example.com.yaml").write_text(NODE2)

        records = enumerate_instances(tmp_path)

        assert records[0].name == "b.example.com"


class TestHostInventory:
    """Tests for the HostInventory facade."""

    @pytest.fixture
    def hosts_file(self, tmp_path):
        path = tmp_path / "dhcpd.hosts"
        path.write_text(
            "# hand-written entries\n"
            "host printer {\n"
            "  hardware ethernet 00:11:22:33:44:55;\n"
            "  fixed-address 10.0.9.9;\n"
            "}\n"
            "host node2.example.com {\n"
            "  hardware ethernet aa:bb:cc:dd:ee:99;\n"
            "  fixed-address 10.0.0.2;\n"
            '  option host-name "node2.example.com";\n'
            "}\n"
        )
        return path

    @pytest.fixture
    def inventory(self, enc_dir, hosts_file):
        return HostInventory(enc_dir, hosts_file)

    def test_enc_for(self, inventory):
        assert inventory.enc_for("node2.example.com")["ip"] == "10.0.0.2"
        assert inventory.enc_for("ghost.example.com") == {"hostname": "ghost.example.com"}

    def test_pxe_for(self, inventory):
        pxe = inventory.pxe_for("node1.example.com")
        assert pxe.mac == "aa:bb:cc:dd:ee:01"
        assert len(pxe.ip_map) == 2

    def test_pxe_for_unknown_host(self, inventory):
        pxe = inventory.pxe_for("ghost.example.com")
        assert pxe.content is None

    def test_existing(self, inventory):
        assert inventory.existing("printer").ip == "10.0.9.9"
        assert inventory.existing("node1.example.com") is None

    def test_diff(self, inventory):
        diff = inventory.diff()
        changes = {c.key: c.change_type for c in diff.changes}

        assert changes["node1.example.com"] == ChangeType.CREATE
        assert changes["node2.example.com"] == ChangeType.MODIFY
        assert "printer" not in changes

    def test_diff_purge(self, inventory):
        changes = {c.key: c.change_type for c in inventory.diff(purge=True).changes}
        assert changes["printer"] == ChangeType.DELETE

    def test_sync_writes_and_converges(self, inventory, hosts_file):
        diff, text = inventory.sync()

        assert diff.total_changes == 3
        assert hosts_file.read_text() == text
        assert "host printer {" in text
        assert "aa:bb:cc:dd:ee:99" not in text
        assert inventory.diff().no_change

    def test_sync_dry_run(self, inventory, hosts_file):
        before = hosts_file.read_text()

        _, text = inventory.sync(dry_run=True)

        assert hosts_file.read_text() == before
        assert "host node1.example.com {" in text

    def test_ensure_absent(self, inventory, hosts_file):
        diff, text = inventory.ensure_absent("printer")

        assert diff.total_changes == 1
        assert "printer" not in text
        assert inventory.existing("printer") is None

    def test_ensure_absent_unknown(self, inventory, hosts_file):
        before = hosts_file.read_text()
        diff, _ = inventory.ensure_absent("ghost.example.com")
        assert diff.no_change
        assert hosts_file.read_text() == before

    def test_shared_cache_invalidated_by_sync(self, enc_dir, hosts_file):
        cache = HostsFileCache()
        inventory = HostInventory(enc_dir, hosts_file, cache=cache)
        inventory.diff()
        assert hosts_file in cache

        inventory.sync()

        assert hosts_file not in cache
