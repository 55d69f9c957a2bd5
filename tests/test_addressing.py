"""Tests for static address planning."""

import pytest

from vm_batch.addressing import AddressPlan, check_ip_range, parse_ip_cidr
from vm_batch.errors import AddressOverflowError, FormatError, RangeError


class TestParseIpCidr:
    """Parsing of the first static address."""

    def test_default_prefix(self):
        plan = parse_ip_cidr("192.168.1.50")
        assert plan == AddressPlan(network="192.168.1", start_octet=50, prefix_length=24)

    def test_explicit_prefix(self):
        plan = parse_ip_cidr("10.0.0.5/16")
        assert plan.network == "10.0.0"
        assert plan.start_octet == 5
        assert plan.prefix_length == 16

    @pytest.mark.parametrize(
        "value",
        ["192.168.1.300", "256.1.1.1", "192.168.1.1/33", "192.168.1.1/100", "192.168.1.1000", "1000.0.0.1"],
    )
    def test_out_of_range(self, value):
        with pytest.raises(RangeError):
            parse_ip_cidr(value)

    @pytest.mark.parametrize(
        "value", ["192.168.1", "192.168.1.1/", "a.b.c.d", "192.168.1.1.1", "", "192.168.\u0661.1"]
    )
    def test_malformed(self, value):
        with pytest.raises(FormatError):
            parse_ip_cidr(value)


class TestCheckIpRange:
    """Overflow detection for the address sequence."""

    def test_overflow_past_254(self):
        with pytest.raises(AddressOverflowError):
            check_ip_range(250, 10, 24)

    def test_fits(self):
        check_ip_range(240, 5, 24)

    def test_exactly_254(self):
        check_ip_range(250, 5, 24)

    def test_wide_prefix_still_limited_by_last_octet(self):
        with pytest.raises(AddressOverflowError):
            check_ip_range(250, 10, 16)

    def test_narrow_prefix_stops_before_broadcast(self):
        # /26 starting at .10 covers .0-.63, last usable .62
        check_ip_range(10, 53, 26)
        with pytest.raises(AddressOverflowError):
            check_ip_range(10, 54, 26)

    def test_non_positive_count(self):
        with pytest.raises(RangeError):
            check_ip_range(10, 0, 24)


class TestAddressPlan:
    """Per-machine addresses and gateway."""

    def test_sequence_and_gateway(self):
        plan = parse_ip_cidr("192.168.1.100/24")
        assert plan.cidr(1) == "192.168.1.100/24"
        assert plan.cidr(2) == "192.168.1.101/24"
        assert plan.gateway == "192.168.1.1"
        assert plan.ipconfig(2) == "ip=192.168.1.101/24,gw=192.168.1.1"
