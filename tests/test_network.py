"""
Unit tests for isInNet / isInNetEx network matching.
"""

import pytest

from px_pac.error_handling import ErrorCategory, ErrorManager, ParseError
from px_pac.matching import NetworkMatcher, masked_equal, parse_prefix, prefix_mask
from px_pac.resolver import Resolver

from test_mocks import FakeResolverBackend


class TestMaskHelpers:
    """Test cases for the mask helpers."""

    def test_prefix_mask_ipv4(self):
        """Test IPv4 prefix masks."""
        assert prefix_mask(4, 20) == bytes([255, 255, 240, 0])
        assert prefix_mask(4, 0) == bytes(4)
        assert prefix_mask(4, 32) == bytes([255] * 4)

    def test_prefix_mask_ipv6(self):
        """Test IPv6 prefix masks."""
        assert prefix_mask(6, 32) == bytes([255] * 4 + [0] * 12)
        assert len(prefix_mask(6, 128)) == 16

    def test_prefix_mask_out_of_range(self):
        """Test an overlong prefix is rejected."""
        with pytest.raises(ParseError):
            prefix_mask(4, 33)

    def test_masked_equal_length_mismatch(self):
        """Test mixed address lengths never match."""
        assert masked_equal(bytes(4), bytes(16), bytes(4)) is False

    def test_parse_prefix(self):
        """Test a valid prefix parses."""
        address, length = parse_prefix("2001:db8::/32")
        assert address.version == 6
        assert length == 32

    @pytest.mark.parametrize("literal", [
        "10.0.0.0", "10.0.0.0/", "10.0.0.0/abc", "10.0.0.0/-1", "10.0.0.0/33",
        "::/129", "example.com/8", "10.0.0/8", "10.0.0.0/ 8", "10.0.0.0/８",
    ])
    def test_parse_prefix_rejects(self, literal):
        """Test malformed prefixes are rejected."""
        with pytest.raises(ParseError):
            parse_prefix(literal)


class TestNetworkMatcher:
    """Test cases for isInNet and isInNetEx."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_manager = ErrorManager()
        self.backend = FakeResolverBackend(hosts={
            "intranet": ["10.2.3.4"],
            "v6only.example": ["2001:db8::10"],
            "dual.example": ["2001:db8::20", "192.0.2.20"],
        })
        self.resolver = Resolver(self.backend, timeout=1.0, error_manager=self.error_manager)
        self.matcher = NetworkMatcher(self.resolver, self.error_manager)

    def teardown_method(self):
        """Clean up test fixtures."""
        self.resolver.close()

    def test_is_in_net_literal(self):
        """Test isInNet with an address literal."""
        assert self.matcher.is_in_net("10.2.3.4", "10.2.3.0", "255.255.255.0") is True
        assert self.matcher.is_in_net("10.2.4.4", "10.2.3.0", "255.255.255.0") is False

    def test_is_in_net_resolves_hostname(self):
        """Test isInNet resolves a hostname."""
        assert self.matcher.is_in_net("intranet", "10.0.0.0", "255.0.0.0") is True
        assert self.backend.calls == ["intranet"]

    def test_is_in_net_literal_does_not_query_dns(self):
        """Test a literal host is never looked up."""
        self.matcher.is_in_net("10.2.3.4", "10.0.0.0", "255.0.0.0")
        assert self.backend.calls == []

    def test_is_in_net_unresolvable(self):
        """Test an unresolvable host is not in any net."""
        assert self.matcher.is_in_net("nowhere.invalid", "10.0.0.0", "255.0.0.0") is False

    def test_is_in_net_malformed_pattern_or_mask(self):
        """Test malformed patterns and masks are reported."""
        assert self.matcher.is_in_net("10.2.3.4", "10.2.3", "255.255.255.0") is False
        assert self.matcher.is_in_net("10.2.3.4", "10.2.3.0", "255.255.255") is False
        assert self.matcher.is_in_net("10.2.3.4", "intranet", "255.255.255.0") is False
        assert len(self.error_manager.get_error_history(category=ErrorCategory.PARSE)) == 3

    def test_is_in_net_is_ipv4_only(self):
        """Test isInNet ignores IPv6."""
        assert self.matcher.is_in_net("2001:db8::1", "10.0.0.0", "255.0.0.0") is False
        assert self.matcher.is_in_net("10.0.0.1", "::", "::") is False
        assert self.matcher.is_in_net("v6only.example", "0.0.0.0", "0.0.0.0") is False

    def test_is_in_net_uses_first_resolved_address(self):
        """Test isInNet uses only the first address."""
        assert self.matcher.is_in_net("dual.example", "192.0.2.0", "255.255.255.0") is False

    def test_non_contiguous_mask_honoured(self):
        """Test non-contiguous masks apply bitwise."""
        assert self.matcher.is_in_net("10.9.3.7", "10.0.3.0", "255.0.255.0") is True
        assert self.matcher.is_in_net("10.9.4.7", "10.0.3.0", "255.0.255.0") is False

    def test_zero_mask_matches_everything(self):
        """Test a zero mask matches any IPv4 host."""
        assert self.matcher.is_in_net("203.0.113.9", "10.0.0.0", "0.0.0.0") is True

    def test_is_in_net_ex_ipv6(self):
        """Test isInNetEx with IPv6 prefixes."""
        assert self.matcher.is_in_net_ex("2001:db8::1", "2001:db8::/32") is True
        assert self.matcher.is_in_net_ex("2001:db9::1", "2001:db8::/32") is False

    def test_is_in_net_ex_ipv4(self):
        """Test isInNetEx with IPv4 prefixes."""
        assert self.matcher.is_in_net_ex("10.1.2.3", "10.0.0.0/8") is True
        assert self.matcher.is_in_net_ex("11.1.2.3", "10.0.0.0/8") is False
        assert self.matcher.is_in_net_ex("198.51.100.1", "0.0.0.0/0") is True

    def test_is_in_net_ex_family_mismatch(self):
        """Test mismatched families never match."""
        assert self.matcher.is_in_net_ex("10.1.2.3", "::/0") is False
        assert self.matcher.is_in_net_ex("2001:db8::1", "0.0.0.0/0") is False

    def test_is_in_net_ex_invalid_prefix_length(self):
        """Test invalid prefixes give False."""
        assert self.matcher.is_in_net_ex("10.1.2.3", "10.0.0.0/33") is False
        assert self.matcher.is_in_net_ex("2001:db8::1", "2001:db8::/129") is False
        assert self.matcher.is_in_net_ex("10.1.2.3", "10.0.0.0") is False

    def test_is_in_net_ex_hostname_any_address(self):
        """Test isInNetEx matches any resolved address."""
        assert self.matcher.is_in_net_ex("dual.example", "192.0.2.0/24") is True
        assert self.matcher.is_in_net_ex("dual.example", "2001:db8::/64") is True
        assert self.matcher.is_in_net_ex("dual.example", "198.51.100.0/24") is False

    def test_is_in_net_ex_bracketed_host(self):
        """Test a bracketed host is accepted."""
        assert self.matcher.is_in_net_ex("[2001:db8::1]", "2001:db8::/48") is True
