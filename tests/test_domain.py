"""
Unit tests for the domain predicates.
"""

from px_pac.matching import dns_domain_is, dns_domain_levels, is_plain_host_name, local_host_or_domain_is


class TestDnsDomainIs:
    """Test cases for dnsDomainIs."""

    def test_suffix_match(self):
        """Test a plain suffix match."""
        assert dns_domain_is("www.example.com", ".example.com") is True
        assert dns_domain_is("www", ".example.com") is False

    def test_domain_without_leading_dot_is_not_a_match_for_the_apex(self):
        """Test a dotted domain does not match its apex."""
        assert dns_domain_is("example.com", ".example.com") is False
        assert dns_domain_is("example.com", "example.com") is True

    def test_plain_suffix_not_label_aware(self):
        """Historical behaviour: any string suffix counts."""
        assert dns_domain_is("notexample.com", "example.com") is True

    def test_case_sensitive(self):
        """Test matching is case-sensitive."""
        assert dns_domain_is("www.EXAMPLE.com", ".example.com") is False

    def test_longer_domain_than_host(self):
        """Test a domain longer than the host never matches."""
        assert dns_domain_is("com", ".example.com") is False


class TestIsPlainHostName:
    """Test cases for isPlainHostName."""

    def test_plain_and_qualified(self):
        """Test names with and without dots."""
        assert is_plain_host_name("server1") is True
        assert is_plain_host_name("server1.local") is False

    def test_ip_literal_is_not_plain(self):
        """Test an IPv4 literal is not plain."""
        assert is_plain_host_name("10.0.0.1") is False

    def test_ipv6_literal_has_no_dot(self):
        """Test an IPv6 literal without dots counts as plain."""
        assert is_plain_host_name("::1") is True


class TestLocalHostOrDomainIs:
    """Test cases for localHostOrDomainIs."""

    def test_exact_match(self):
        """Test an exact match."""
        assert local_host_or_domain_is("www.netscape.com", "www.netscape.com") is True

    def test_unqualified_host_matches_first_label(self):
        """Test an unqualified host matches the first label."""
        assert local_host_or_domain_is("www", "www.netscape.com") is True

    def test_different_domain(self):
        """Test a different domain does not match."""
        assert local_host_or_domain_is("www.mcom.com", "www.netscape.com") is False

    def test_different_host(self):
        """Test a different host does not match."""
        assert local_host_or_domain_is("home.netscape.com", "www.netscape.com") is False
        assert local_host_or_domain_is("home", "www.netscape.com") is False

    def test_prefix_must_end_at_label_boundary(self):
        """Test a partial label does not match."""
        assert local_host_or_domain_is("ww", "www.netscape.com") is False

    def test_empty_host(self):
        """Test empty host edge cases."""
        assert local_host_or_domain_is("", ".netscape.com") is False
        assert local_host_or_domain_is("", "") is True

    def test_plain_hostdom(self):
        """Test a dotless hostdom needs an exact match."""
        assert local_host_or_domain_is("www", "wwwx") is False


class TestDnsDomainLevels:
    """Test cases for dnsDomainLevels."""

    def test_counts_dots(self):
        """Test levels count the dots."""
        assert dns_domain_levels("a.b.c") == 2
        assert dns_domain_levels("a") == 0
        assert dns_domain_levels("www.netscape.com") == 2
        assert dns_domain_levels("") == 0

    def test_trailing_dot_counts(self):
        """Test a trailing dot adds a level."""
        assert dns_domain_levels("example.com.") == 2
