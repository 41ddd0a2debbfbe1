"""
Tests for the dependency injection container.
"""
import pytest

from config import reset_config
from core.errors import (
    CircularDependencyError,
    ContainerError,
    ServiceNotFoundError,
    ServiceResolutionError,
)
from di import (
    AbstractInjectionAware,
    Container,
    DiInterface,
    Service,
    get_default,
    reset_default,
    set_default,
)


class Mailer:
    """Plain service class."""

    def __init__(self, sender="noreply@example.com", retries=1):
        self.sender = sender
        self.retries = retries


class Repository(AbstractInjectionAware):
    """Injection-aware service class."""


class TestRegistration:
    """set / attempt / set_shared / set_service."""

    def test_set_and_has(self, container):
        service = container.set("mailer", Mailer)

        assert container.has("mailer")
        assert isinstance(service, Service)
        assert service.is_shared() is False

    def test_set_replaces_existing(self, container):
        container.set("value", lambda: 1)
        container.set("value", lambda: 2)

        assert container.get("value") == 2

    def test_set_shared_marks_shared(self, container):
        service = container.set_shared("mailer", Mailer)
        assert service.is_shared() is True

    def test_attempt_registers_free_name(self, container):
        service = container.attempt("mailer", Mailer, True)

        assert isinstance(service, Service)
        assert container.get_service("mailer").is_shared()

    def test_attempt_keeps_existing(self, container):
        container.set("value", lambda: "first")

        assert container.attempt("value", lambda: "second") is False
        assert container.get("value") == "first"

    def test_set_service(self, container):
        service = Service(Mailer, shared=True)
        assert container.set_service("mailer", service) is service
        assert container.get_service("mailer") is service

    def test_get_services_is_a_copy(self, container):
        container.set("a", 1)
        services = container.get_services()
        services.clear()

        assert list(container.get_services()) == ["a"]

    def test_get_raw(self, container):
        container.set("mailer", Mailer)
        assert container.get_raw("mailer") is Mailer


class TestResolution:
    """get / get_shared semantics."""

    def test_get_returns_fresh_instances(self, container):
        container.set_shared("mailer", Mailer)

        first = container.get("mailer")
        second = container.get("mailer")

        assert isinstance(first, Mailer)
        assert first is not second

    def test_get_shared_returns_same_instance(self, container):
        container.set("mailer", Mailer)

        first = container.get_shared("mailer")
        assert container.get_shared("mailer") is first
        assert container.get_service("mailer").get_shared_instance() is first

    def test_get_does_not_replace_shared_instance(self, container):
        container.set_shared("mailer", Mailer)
        shared = container.get_shared("mailer")
        container.get("mailer")

        assert container.get_shared("mailer") is shared

    def test_shared_none_instance_is_cached(self, container):
        calls = []
        container.set_shared("nothing", lambda: calls.append(1))

        assert container.get_shared("nothing") is None
        assert container.get_shared("nothing") is None
        assert calls == [1]

    def test_mapping_parameters_are_keywords(self, container):
        container.set("mailer", Mailer)
        mailer = container.get("mailer", {"sender": "ops@example.com", "retries": 3})

        assert mailer.sender == "ops@example.com"
        assert mailer.retries == 3

    def test_sequence_parameters_are_positional(self, container):
        container.set("mailer", Mailer)
        mailer = container.get("mailer", ["ops@example.com", 5])

        assert mailer.sender == "ops@example.com"
        assert mailer.retries == 5

    def test_non_callable_definition_returned_as_is(self, container):
        settings = {"dsn": "sqlite://"}
        container.set("settings", settings)

        assert container.get("settings") is settings

    def test_dotted_path_definition(self, container):
        container.set("ordered", "collections:OrderedDict")
        container.set("counter", "collections.Counter")

        assert type(container.get("ordered")).__name__ == "OrderedDict"
        assert container.get("counter", [["a", "a"]])["a"] == 2

    def test_unknown_dotted_path(self, container):
        container.set("missing", "collections:Nothing")

        with pytest.raises(ServiceResolutionError, match="missing"):
            container.get("missing")

    def test_factory_error_is_wrapped(self, container):
        def broken():
            raise RuntimeError("boom")

        container.set("broken", broken)

        with pytest.raises(ServiceResolutionError) as exc_info:
            container.get("broken")
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert "boom" in exc_info.value.message

    def test_service_marked_resolved(self, container):
        service = container.set("mailer", Mailer)
        assert service.is_resolved() is False

        container.get("mailer")
        assert service.is_resolved() is True

    def test_factory_may_use_container(self, container):
        container.set_shared("sender", lambda: "ops@example.com")
        container.set("mailer", lambda: Mailer(container.get_shared("sender")))

        assert container.get("mailer").sender == "ops@example.com"

    def test_circular_shared_dependency(self, container):
        container.set_shared("a", lambda: container.get_shared("b"))
        container.set_shared("b", lambda: container.get_shared("a"))

        with pytest.raises(CircularDependencyError):
            container.get_shared("a")

        # The failed resolution leaves no stale bookkeeping
        container.set_shared("b", lambda: "b")
        assert container.get_shared("a") == "b"


class TestMissingServices:
    """Unknown names."""

    @pytest.mark.parametrize("method", ["get", "get_shared", "get_service", "get_raw"])
    def test_unknown_service(self, container, method):
        with pytest.raises(ServiceNotFoundError) as exc_info:
            getattr(container, method)("unknown")

        assert exc_info.value.service_name == "unknown"
        assert "Service 'unknown' wasn't found" in str(exc_info.value)

    def test_unknown_service_is_key_error(self, container):
        with pytest.raises(KeyError):
            container["unknown"]


class TestRemoval:
    """remove and the cached instance."""

    def test_remove(self, container):
        container.set_shared("mailer", Mailer)
        container.get_shared("mailer")
        container.remove("mailer")

        assert not container.has("mailer")
        with pytest.raises(ServiceNotFoundError):
            container.get_shared("mailer")

    def test_remove_unknown_is_noop(self, container):
        container.remove("unknown")
        assert len(container) == 0

    def test_reregistration_builds_new_shared_instance(self, container):
        container.set_shared("mailer", Mailer)
        first = container.get_shared("mailer")

        container.remove("mailer")
        container.set_shared("mailer", Mailer)

        assert container.get_shared("mailer") is not first


class TestMappingAccess:
    """dict-style access to services."""

    def test_setitem_registers_shared(self, container):
        container["mailer"] = Mailer

        assert container.get_service("mailer").is_shared()
        assert container["mailer"] is container["mailer"]

    def test_getitem_honours_shared_flag(self, container):
        container.set("mailer", Mailer)
        assert container["mailer"] is not container["mailer"]

    def test_contains_len_iter_delitem(self, container):
        container.set("a", 1)
        container.set("b", 2)

        assert "a" in container
        assert len(container) == 2
        assert list(container) == ["a", "b"]

        del container["a"]
        assert "a" not in container


class TestDefaultContainer:
    """Process-wide default slot."""

    def test_slot_starts_empty(self):
        assert DiInterface.get_default() is None
        assert get_default() is None

    def test_first_container_claims_slot(self):
        first = Container()
        Container()

        assert DiInterface.get_default() is first

    def test_auto_default_disabled_by_argument(self, container):
        assert DiInterface.get_default() is None

    def test_auto_default_disabled_by_configuration(self, monkeypatch):
        monkeypatch.setenv("PHALCON_DI_AUTO_DEFAULT", "false")
        reset_config()

        Container()
        assert DiInterface.get_default() is None

    def test_set_default_replaces(self):
        first = Container()
        second = Container(auto_default=False)

        set_default(second)
        assert get_default() is second
        assert get_default() is not first

    def test_reset(self):
        Container()
        reset_default()
        assert DiInterface.get_default() is None


class TestInjectionAware:
    """Components receiving the container."""

    def test_resolution_injects_container(self, container):
        container.set("repository", Repository)
        repository = container.get("repository")

        assert repository.get_di() is container

    def test_explicit_container(self, container):
        repository = Repository()
        repository.set_di(container)

        assert repository.get_di() is container

    def test_falls_back_to_default(self):
        default = Container()
        repository = Repository()

        assert repository.get_di() is default

    def test_no_container_available(self):
        with pytest.raises(ContainerError, match="internal services"):
            Repository().get_di()

    def test_service_uses_shared_instance(self, container):
        container.set("mailer", Mailer)
        repository = Repository()
        repository.set_di(container)

        assert repository.service("mailer") is container.get_shared("mailer")

    def test_service_with_empty_container(self, container):
        repository = Repository()
        repository.set_di(container)

        with pytest.raises(ServiceNotFoundError):
            repository.service("mailer")

    def test_service_without_container(self):
        with pytest.raises(ContainerError, match="the 'mailer' service") as exc_info:
            Repository().service("mailer")

        assert exc_info.value.service_name == "mailer"
        assert isinstance(exc_info.value.__cause__, ContainerError)
        assert "internal services" in str(exc_info.value.__cause__)

    def test_service_falls_back_to_default(self):
        default = Container()
        default.set("mailer", Mailer)

        assert Repository().service("mailer") is default.get_shared("mailer")
