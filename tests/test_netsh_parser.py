"""Tests for the netsh scan and interface parsers."""

from utils.wifi.parsers import parse_netsh_interfaces, parse_netsh_scan

SAMPLE_SCAN = """
Interface name : Wi-Fi
There are 2 networks currently visible.

SSID 1 : HomeNetwork
    Network type            : Infrastructure
    Authentication          : WPA2-Personal
    Encryption              : CCMP
    BSSID 1                 : AA:BB:CC:DD:EE:01
         Signal             : 87%
         Radio type         : 802.11ac
         Channel            : 36
    BSSID 2                 : AA:BB:CC:DD:EE:02
         Signal             : 45%
         Radio type         : 802.11n
         Channel            : 6

SSID 2 : FreeAirportWiFi
    Network type            : Infrastructure
    Authentication          : Open
    Encryption              : None
    BSSID 1                 : 11:22:33:44:55:66
         Signal             : 20%
         Radio type         : 802.11n
         Channel            : 11
"""

SAMPLE_INTERFACES = """
There is 1 interface on the system:

    Name                   : Wi-Fi
    Description            : Intel(R) Wi-Fi 6 AX201 160MHz
    GUID                   : 12345678-1234-1234-1234-123456789abc
    Physical address       : a0:b1:c2:d3:e4:f5
    State                  : disconnected
    Radio status           : Hardware On
                             Software On
"""


class TestParseNetshScan:
    """Tests for parse_netsh_scan."""

    def test_one_record_per_bssid(self):
        """Each BSSID line yields one record sharing its SSID block."""
        networks = parse_netsh_scan(SAMPLE_SCAN)

        assert len(networks) == 3
        assert [n.ssid for n in networks] == ['HomeNetwork', 'HomeNetwork', 'FreeAirportWiFi']
        assert [n.bssid for n in networks] == [
            'AA:BB:CC:DD:EE:01',
            'AA:BB:CC:DD:EE:02',
            '11:22:33:44:55:66',
        ]

    def test_security_attributes_carried(self):
        """Authentication and encryption apply to every BSSID of the block."""
        networks = parse_netsh_scan(SAMPLE_SCAN)

        assert networks[0].authentication == 'WPA2-Personal'
        assert networks[1].encryption == 'CCMP'
        assert networks[2].authentication == 'Open'
        assert networks[2].encryption == 'None'

    def test_signal_parsed(self):
        """Signal is kept as text and exposed as a percentage."""
        networks = parse_netsh_scan(SAMPLE_SCAN)

        assert networks[0].signal == '87%'
        assert networks[0].signal_percent == 87
        assert networks[1].signal_percent == 45

    def test_risk_filled_in(self):
        """Every parsed record gets a risk rating."""
        networks = parse_netsh_scan(SAMPLE_SCAN)

        assert networks[0].risk == 'L'
        assert networks[2].risk == 'C'
        assert all(n.is_evil_twin is False for n in networks)

    def test_parsing_is_repeatable(self):
        """Parsing the same text twice yields identical batches."""
        assert parse_netsh_scan(SAMPLE_SCAN) == parse_netsh_scan(SAMPLE_SCAN)

    def test_n_blocks_yield_n_records(self):
        """Well-formed blocks produce one record each with ssid and bssid."""
        blocks = []
        for i in range(7):
            blocks.append(f"SSID {i + 1} : Net{i}")
            blocks.append("    Authentication : WPA2-Personal")
            blocks.append("    Encryption : CCMP")
            blocks.append(f"    BSSID 1 : 00:00:00:00:00:{i:02x}")
            blocks.append("         Signal : 50%")

        networks = parse_netsh_scan('\n'.join(blocks))

        assert len(networks) == 7
        assert all(n.ssid and n.bssid for n in networks)

    def test_missing_security_lines(self):
        """A BSSID straight after the SSID has empty security attributes."""
        networks = parse_netsh_scan("SSID 1 : Home\nBSSID 1 : aa:bb:cc:dd:ee:ff")

        assert len(networks) == 1
        assert networks[0].authentication == ''
        assert networks[0].encryption == ''
        assert networks[0].signal == ''

    def test_new_ssid_resets_security(self):
        """Security values do not leak into the next SSID block."""
        output = "\n".join([
            "SSID 1 : First",
            "Authentication : WPA2-Personal",
            "Encryption : CCMP",
            "BSSID 1 : aa:aa:aa:aa:aa:01",
            "SSID 2 : Second",
            "BSSID 1 : aa:aa:aa:aa:aa:02",
        ])
        networks = parse_netsh_scan(output)

        assert networks[1].ssid == 'Second'
        assert networks[1].authentication == ''
        assert networks[1].encryption == ''

    def test_empty_ssid_line_ignored(self):
        """An SSID line without a value keeps the previous accumulators."""
        output = "\n".join([
            "SSID 1 : Office",
            "Authentication : WPA2-Enterprise",
            "Encryption : CCMP",
            "SSID 2 : ",
            "BSSID 1 : aa:aa:aa:aa:aa:01",
        ])
        networks = parse_netsh_scan(output)

        assert len(networks) == 1
        assert networks[0].ssid == 'Office'
        assert networks[0].authentication == 'WPA2-Enterprise'

    def test_bssid_without_ssid_skipped(self):
        """No record is emitted before any SSID has been seen."""
        networks = parse_netsh_scan("BSSID 1 : aa:bb:cc:dd:ee:ff\nSignal : 50%")
        assert networks == []

    def test_empty_bssid_skipped(self):
        networks = parse_netsh_scan("SSID 1 : Home\nBSSID 1 : \nSignal : 50%")
        assert networks == []

    def test_signal_without_record_ignored(self):
        networks = parse_netsh_scan("SSID 1 : Home\nSignal : 50%")
        assert networks == []

    def test_value_split_on_first_colon(self):
        """BSSIDs keep every colon after the label."""
        networks = parse_netsh_scan("SSID 1 : Home\nBSSID 1 : aa:bb:cc:dd:ee:ff")
        assert networks[0].bssid == 'aa:bb:cc:dd:ee:ff'

    def test_garbage_input(self):
        """Malformed text yields no records rather than an error."""
        assert parse_netsh_scan('') == []
        assert parse_netsh_scan('no colons here\njust noise') == []


class TestParseNetshInterfaces:
    """Tests for parse_netsh_interfaces."""

    def test_interface_present(self):
        result = parse_netsh_interfaces(SAMPLE_INTERFACES)

        assert result['has_interface'] is True
        assert result['radio_software_off'] is False

    def test_no_interface(self):
        result = parse_netsh_interfaces("There is 0 interface on the system:")

        assert result['has_interface'] is False

    def test_software_off_on_following_line(self):
        """Software Off on the line after Radio status turns the radio off."""
        output = SAMPLE_INTERFACES.replace('Software On', 'Software Off')
        result = parse_netsh_interfaces(output)

        assert result['has_interface'] is True
        assert result['radio_software_off'] is True

    def test_software_off_on_same_line(self):
        output = "    State : disconnected\n    Radio status : Software Off\n"
        result = parse_netsh_interfaces(output)

        assert result['radio_software_off'] is True
