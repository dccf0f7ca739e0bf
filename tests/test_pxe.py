"""Tests for PXE record derivation."""
import logging

import pytest
from enc2dhcp.enc import PxeDeriver, derive_pxe


class TestPxeDeriver:
    """Tests for the primary interface."""

    def test_scenario_basic(self):
        """Hyphenated upper-case MAC is normalized and group defaults to pxe."""
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "pxe": {"mac": "AA-BB-CC-DD-EE-FF", "ip": "10.0.0.5"},
        })

        assert pxe.mac == "aa:bb:cc:dd:ee:ff"
        assert pxe.ip == "10.0.0.5"
        assert pxe.group == "pxe"
        assert pxe.name == pxe.hostname == "node1.example.com"
        assert "host node1.example.com {" in pxe.content
        assert 'option host-name "node1.example.com";' in pxe.content

    def test_empty_enc(self):
        """No ENC data is a valid, empty result."""
        for enc in (None, {}):
            pxe = derive_pxe(enc)
            assert pxe.is_empty
            assert pxe.content is None
            assert pxe.ip_map == []

    def test_pxe_section_wins_over_flat_fields(self):
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "mac": "11:11:11:11:11:11",
            "ip": "10.0.0.1",
            "pxe": {"mac": "22:22:22:22:22:22"},
        })

        assert pxe.mac == "22:22:22:22:22:22"
        assert pxe.ip == "10.0.0.1"

    def test_flat_fields_used_without_pxe_section(self):
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "mac": "11:11:11:11:11:11",
            "ip": "10.0.0.1",
            "pxe": "not a mapping",
        })

        assert pxe.mac == "11:11:11:11:11:11"
        assert pxe.content is not None

    def test_hostname_lowercased(self):
        pxe = derive_pxe({"hostname": "Node1.Example.COM"})
        assert pxe.name == "node1.example.com"
        assert pxe.hostname == "node1.example.com"

    def test_invalid_values_dropped_with_one_warning(self, caplog):
        """Bad mac and ip are removed and reported together."""
        with caplog.at_level(logging.WARNING, logger="enc2dhcp.enc.pxe"):
            pxe = derive_pxe({
                "hostname": "node1.example.com",
                "pxe": {"mac": "not-a-mac", "ip": "10.0.0.999"},
            })

        assert pxe.mac is None
        assert pxe.ip is None
        assert pxe.content is None
        assert pxe.ip_map == []
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "not-a-mac" in warnings[0].getMessage()
        assert "10.0.0.999" in warnings[0].getMessage()

    def test_missing_values_not_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="enc2dhcp.enc.pxe"):
            derive_pxe({"hostname": "node1.example.com"})
        assert not caplog.records

    def test_group_normalized(self):
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "pxe": {"mac": "aa:bb:cc:dd:ee:ff", "ip": "10.0.0.5", "group": "Rack-12"},
        })

        assert pxe.group == "rack_12"
        assert 'option host-name "node1.example.com";' in pxe.content

    def test_to_dict_drops_unset_fields(self):
        pxe = derive_pxe({"hostname": "node1.example.com", "pxe": {"mac": "bad"}})
        assert pxe.to_dict() == {"name": "node1.example.com", "hostname": "node1.example.com"}


class TestInterfaceScan:
    """Tests for secondary interface mappings."""

    @pytest.fixture
    def enc(self):
        return {
            "hostname": "node1.example.com",
            "pxe": {
                "mac": "aa:bb:cc:dd:ee:00",
                "ip": "10.0.0.5",
                "mac1": "AA-BB-CC-DD-EE-01",
                "ip1": "10.0.1.5",
                "group1": "VLAN101",
                "mac2": "aa:bb:cc:dd:ee:02",
                "ip2": "10.0.2.5",
            },
        }

    def test_mappings_in_order(self, enc):
        pxe = derive_pxe(enc)

        assert [m.index for m in pxe.ip_map] == [0, 1, 2]
        assert [m.name for m in pxe.ip_map] == ["node1-eth0", "node1-eth1", "node1-eth2"]

    def test_index_zero_mirrors_primary(self, enc):
        """eth0 carries the primary group, so it renders no stanza of its own."""
        first = derive_pxe(enc).ip_map[0]
        assert first.mac == "aa:bb:cc:dd:ee:00"
        assert first.ip == "10.0.0.5"
        assert first.group == "pxe"
        assert first.content is None

    def test_index_zero_uses_normalized_primary_fields(self):
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "pxe": {"mac": "AA-BB-CC-DD-EE-FF", "ip": "10.0.0.5", "group": "Rack-12"},
        })

        first = pxe.ip_map[0]
        assert first.mac == "aa:bb:cc:dd:ee:ff"
        assert first.group == "rack_12"
        assert first.content.startswith("host node1-eth0 {")

    def test_mapping_fields(self, enc):
        eth1 = derive_pxe(enc).ip_map[1]

        assert eth1.mac == "aa:bb:cc:dd:ee:01"
        assert eth1.group == "vlan101"
        assert eth1.content.startswith("host node1-eth1 {")
        assert "host-name" not in eth1.content

    def test_default_group(self, enc):
        assert derive_pxe(enc).ip_map[2].group == "default"

    def test_scan_stops_at_first_gap(self, enc):
        """A valid index after an invalid one is never considered."""
        enc["pxe"]["mac2"] = "broken"
        enc["pxe"]["mac3"] = "aa:bb:cc:dd:ee:03"
        enc["pxe"]["ip3"] = "10.0.3.5"

        pxe = derive_pxe(enc)

        assert [m.index for m in pxe.ip_map] == [0, 1]

    def test_no_base_interface_no_mappings(self):
        """mac1/ip1 alone do not start the scan."""
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "pxe": {"mac1": "aa:bb:cc:dd:ee:01", "ip1": "10.0.1.5"},
        })

        assert pxe.ip_map == []
        assert pxe.content is None

    def test_flat_base_fields_start_the_scan(self):
        pxe = derive_pxe({
            "hostname": "node1.example.com",
            "mac": "aa:bb:cc:dd:ee:00",
            "ip": "10.0.0.5",
            "pxe": {"mac1": "aa:bb:cc:dd:ee:01", "ip1": "10.0.1.5"},
        })

        assert [m.name for m in pxe.ip_map] == ["node1-eth0", "node1-eth1"]

    def test_at_most_ten_interfaces(self):
        section = {"mac": "aa:bb:cc:dd:ee:00", "ip": "10.0.0.5"}
        for i in range(1, 12):
            section[f"mac{i}"] = f"aa:bb:cc:dd:ee:{i:02x}"
            section[f"ip{i}"] = f"10.0.{i}.5"

        pxe = PxeDeriver().derive({"hostname": "node1.example.com", "pxe": section})

        assert len(pxe.ip_map) == 10
        assert pxe.ip_map[-1].name == "node1-eth9"

    def test_host_records_flatten(self, enc):
        records = derive_pxe(enc).host_records()

        assert [r.name for r in records] == [
            "node1.example.com", "node1-eth1", "node1-eth2"
        ]
        assert records[0].hostname == "node1.example.com"
        assert records[1].hostname is None
