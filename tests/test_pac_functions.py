"""
Unit tests for PacFunctionLibrary, the surface a script host binds.
"""

import logging
import warnings
from unittest.mock import Mock

import pytest

from px_pac.config import RuntimeSettings
from px_pac.error_handling import CoercionError, CoercionWarning, ErrorCategory, ErrorManager
from px_pac.library import CLIENT_VERSION, PAC_FUNCTION_NAMES, PacFunctionLibrary, coerce_string
from px_pac.resolver import CachingResolverBackend, Resolver

from test_mocks import FakeResolverBackend


class Unprintable:
    def __str__(self):
        raise RuntimeError("no string form")


class TestCoerceString:
    """Test cases for the argument coercion policy."""

    @pytest.mark.parametrize("value,expected", [
        ("text", "text"),
        (8080, "8080"),
        (-3, "-3"),
        (1.0, "1"),
        (2.5, "2.5"),
        (b"example.com", "example.com"),
        (bytearray(b"10.0.0.1"), "10.0.0.1"),
    ])
    def test_accepted(self, value, expected):
        """Test values the policy converts."""
        assert coerce_string(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, False, float('nan'), float('inf'), b"\xff\xfe", Unprintable(),
    ])
    def test_rejected(self, value):
        """Test values the policy rejects."""
        with pytest.raises(CoercionError):
            coerce_string(value)

    def test_other_objects_use_str(self):
        """Test other objects convert through str() without emitting warnings."""
        class Host:
            def __str__(self):
                return "proxy.example"

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert coerce_string(Host()) == "proxy.example"


class TestBindings:
    """Test cases for the PAC name bindings."""

    def setup_method(self):
        """Set up test fixtures."""
        self.library = PacFunctionLibrary(
            Resolver(FakeResolverBackend(), error_manager=ErrorManager()),
            error_manager=ErrorManager()
        )

    def teardown_method(self):
        """Clean up test fixtures."""
        self.library.close()

    def test_all_pac_names_bound(self):
        """Test every PAC name is bound to a callable."""
        bindings = self.library.bindings()
        assert set(bindings) == set(PAC_FUNCTION_NAMES)
        assert all(callable(function) for function in bindings.values())

    def test_both_my_ip_address_ex_spellings(self):
        """Test both myIpAddressEx spellings reach the same method."""
        bindings = self.library.bindings()
        assert bindings['myIpAddressEx'].__name__ == bindings['myIPAddressEx'].__name__


class TestPacFunctionLibrary:
    """Test cases for the PAC functions through the library facade."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_manager = ErrorManager()
        self.backend = FakeResolverBackend(
            hosts={
                "www.example.com": ["93.184.216.34"],
                "intranet": ["10.2.3.4"],
            },
            local=["127.0.0.1", "192.168.1.10"]
        )
        self.resolver = Resolver(self.backend, timeout=1.0, error_manager=self.error_manager)
        self.library = PacFunctionLibrary(self.resolver, error_manager=self.error_manager)

    def teardown_method(self):
        """Clean up test fixtures."""
        self.library.close()

    def test_domain_predicates(self):
        """Test the domain predicates and shExpMatch."""
        assert self.library.dns_domain_is("www.example.com", ".example.com") is True
        assert self.library.dns_domain_levels("www.example.com") == 2
        assert self.library.is_plain_host_name("intranet") is True
        assert self.library.local_host_or_domain_is("www", "www.example.com") is True
        assert self.library.sh_exp_match("http://www.example.com/x", "*.example.com/*") is True

    def test_network_and_resolution(self):
        """Test network membership and resolution functions."""
        assert self.library.is_in_net("intranet", "10.0.0.0", "255.0.0.0") is True
        assert self.library.is_in_net_ex("intranet", "10.0.0.0/8") is True
        assert self.library.dns_resolve("www.example.com") == "93.184.216.34"
        assert self.library.dns_resolve_ex("www.example.com") == "93.184.216.34"
        assert self.library.is_resolvable("www.example.com") is True
        assert self.library.is_resolvable_ex("nowhere.invalid") is False
        assert self.library.sort_ip_address_list("10.0.0.2 10.0.0.1") == "10.0.0.1 10.0.0.2"

    def test_my_ip_address(self):
        """Test local address functions."""
        assert self.library.my_ip_address() == "192.168.1.10"
        assert self.library.my_ip_address_ex() == "192.168.1.10"

    def test_numeric_argument_coerced(self):
        """Test numeric arguments are converted and reported."""
        assert self.library.dns_domain_levels(1.5) == 1
        assert self.library.sh_exp_match(8080, "80*") is True
        history = self.error_manager.get_error_history(category=ErrorCategory.COERCION)
        assert any("coerced float" in error.message for error in history)
        assert any("coerced int" in error.message for error in history)

    def test_coercion_reported_once_with_warning_type(self):
        """Test a coercion is recorded once and carries a CoercionWarning."""
        class Host:
            def __str__(self):
                return "intranet"

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert self.library.is_plain_host_name(Host()) is True

        history = self.error_manager.get_error_history(category=ErrorCategory.COERCION)
        assert len(history) == 1
        assert isinstance(history[0].exception, CoercionWarning)

    def test_bytes_argument_coerced(self):
        """Test bytes arguments are decoded."""
        assert self.library.dns_resolve(b"www.example.com") == "93.184.216.34"

    def test_rejected_arguments_return_sentinel(self):
        """Test rejected arguments give each function's sentinel."""
        assert self.library.dns_domain_is(None, ".example.com") is False
        assert self.library.dns_domain_levels(True) == 0
        assert self.library.dns_resolve(None) is None
        assert self.library.dns_resolve_ex(False) == ""
        assert self.library.sort_ip_address_list(None) == ""
        assert self.library.is_in_net("10.0.0.1", None, "255.0.0.0") is False
        history = self.error_manager.get_error_history(category=ErrorCategory.COERCION)
        assert any("rejected" in error.message for error in history)
        assert all(isinstance(error.exception, CoercionError) for error in history)

    def test_rejected_argument_does_not_reach_resolver(self):
        """Test a rejected argument is never looked up."""
        self.library.dns_resolve(None)
        assert self.backend.calls == []

    def test_missing_arguments_treated_as_undefined(self):
        """Test missing arguments behave like undefined."""
        assert self.library.dns_domain_is("www.example.com") is False
        assert self.library.is_in_net("10.0.0.1", "10.0.0.0") is False
        assert self.library.dns_resolve() is None

    def test_extra_arguments_ignored(self):
        """Test surplus arguments are ignored."""
        assert self.library.dns_domain_levels("a.b", "extra", 3) == 1
        assert self.library.my_ip_address("ignored") == "192.168.1.10"

    def test_idempotent(self):
        """Test repeated calls give the same answer."""
        assert self.library.dns_resolve_ex("www.example.com") == self.library.dns_resolve_ex("www.example.com")
        assert self.library.sh_exp_match("abc", "a?c") == self.library.sh_exp_match("abc", "a?c")

    def test_get_client_version(self):
        """Test getClientVersion ignores arguments."""
        assert self.library.get_client_version() == CLIENT_VERSION == "1.0"
        assert self.library.get_client_version("ignored") == "1.0"

    def test_log_writes_to_script_logger(self, caplog):
        """Test log() writes to the script logger."""
        with caplog.at_level(logging.INFO, logger="px_pac.script"):
            assert self.library.log("hello from the script") is None
            self.library.log(42)
            self.library.log()

        messages = [record.getMessage() for record in caplog.records if record.name == "px_pac.script"]
        assert messages == ["hello from the script", "42", "None"]

    def test_log_unprintable_value(self, caplog):
        """Test log() survives a value whose str() raises."""
        with caplog.at_level(logging.INFO, logger="px_pac.script"):
            self.library.log(Unprintable())
        assert any("unprintable Unprintable" in record.getMessage() for record in caplog.records)


class TestUnexpectedFailures:
    """Test cases for failures raised behind the library."""

    def setup_method(self):
        """Set up test fixtures."""
        self.error_manager = ErrorManager()
        self.resolver = Mock(spec=Resolver)
        self.resolver.fallback_address = "127.0.1.1"
        self.resolver.dns_resolve.side_effect = RuntimeError("backend exploded")
        self.resolver.my_ip_address.side_effect = RuntimeError("backend exploded")
        self.resolver.dns_resolve_ex.side_effect = RuntimeError("backend exploded")
        self.library = PacFunctionLibrary(self.resolver, error_manager=self.error_manager)

    def test_sentinels_returned(self):
        """Test unexpected failures give each function's sentinel."""
        assert self.library.dns_resolve("www.example.com") is None
        assert self.library.dns_resolve_ex("www.example.com") == ""

    def test_my_ip_address_uses_configured_fallback(self):
        """Test myIpAddress falls back to the resolver's configured address."""
        assert self.library.my_ip_address() == "127.0.1.1"

    def test_failure_recorded(self):
        """Test unexpected failures are recorded as script errors."""
        self.library.dns_resolve("www.example.com")
        history = self.error_manager.get_error_history(category=ErrorCategory.SCRIPT)
        assert len(history) == 1
        assert history[0].message == "dns_resolve failed unexpectedly"
        assert isinstance(history[0].exception, RuntimeError)


class TestFromSettings:
    """Test cases for building a library from settings."""

    def test_resolver_follows_settings(self):
        """Test the resolver gets the cache and fallback from settings."""
        settings = RuntimeSettings(dns_cache_ttl=10.0, fallback_address="127.0.1.1")
        backend = FakeResolverBackend(fail_local=True)
        with PacFunctionLibrary.from_settings(settings, backend=backend, error_manager=ErrorManager()) as library:
            assert isinstance(library.resolver.backend, CachingResolverBackend)
            assert library.my_ip_address() == "127.0.1.1"
