import pytest

from ripple.core.config import _ALLOWED_LOG_LEVELS
from ripple.core.config import _DEFAULT_LOG_DATEFMT
from ripple.core.config import _DEFAULT_LOG_FMT
from ripple.core.config import Config
from ripple.core.config import ConsoleLoggerConfig
from ripple.core.config import FileLoggerConfig
from ripple.core.config import LoggerConfig
from ripple.core.config import TelemetryConfig
from ripple.core.config import config_property
from ripple.core.error import ConfigValidationError as Error


@pytest.fixture
def holder():
    def _holder(**properties):
        return type("Holder", (), properties)()

    return _holder


@pytest.mark.unit
class TestConfigProperty:
    def test_plain_property_skips_validation(self):
        _property = config_property("ripple")
        assert _property.validate is False
        assert _property.frozen is False
        assert _property.description is None

    @pytest.mark.parametrize(
        "options",
        [
            {"allowed": ("a", "b")},
            {"check": callable},
            {"between": (0, 1)},
        ],
    )
    def test_any_constraint_enables_validation(self, options):
        assert config_property(0, **options).validate is True

    def test_description_is_kept(self):
        _property = config_property(5, description="Rotated files kept")
        assert _property.description == "Rotated files kept"

    def test_storage_name_follows_attribute(self, holder):
        instance = holder(threshold=config_property(3))
        descriptor = type(instance).__dict__["threshold"]
        assert descriptor.property == "_threshold"
        assert type(instance).threshold is descriptor
        assert instance.threshold == 3

    def test_assignment_lands_in_instance_dict(self, holder):
        instance = holder(threshold=config_property(3))
        instance.threshold = 7
        assert instance.__dict__["_threshold"] == 7
        assert type(instance).__dict__["threshold"].default == 3

    def test_values_are_per_instance(self, holder):
        first = holder(shade=config_property("black"))
        second = type(first)()
        first.shade = "red"
        assert second.shade == "black"

    def test_invalid_default_fails_at_class_creation(self, holder):
        level = config_property("TRACE", allowed=_ALLOWED_LOG_LEVELS)
        message = "got invalid value for 'level'"
        with pytest.raises(Error, match=message) as exc:
            holder(level=level)
        assert exc.value.attribute == "Holder.level"
        assert isinstance(exc.value.__cause__, Error)

    def test_none_default_is_not_validated(self, holder):
        instance = holder(name=config_property(None, check=str.isidentifier))
        assert instance.name is None

    @pytest.mark.parametrize(
        "allowed, valid, invalid",
        [
            (("circle", "square"), "square", "triangle"),
            ((1, 2, 4), 4, 3),
            (_ALLOWED_LOG_LEVELS, "ERROR", "VERBOSE"),
        ],
    )
    def test_allowed(self, holder, allowed, valid, invalid):
        instance = holder(shape=config_property(valid, allowed=allowed))
        instance.shape = valid
        with pytest.raises(Error, match="not one of the allowed values"):
            instance.shape = invalid
        assert instance.shape == valid

    @pytest.mark.parametrize(
        "between, inside, outside",
        [
            ((0, 100), [0, 50, 100], [-1, 101]),
            ((0.0, 1.0), [0.0, 0.25, 1.0], [-0.01, 1.5]),
        ],
    )
    def test_between(self, between, inside, outside):
        _property = config_property(inside[0], between=between)
        for value in inside:
            _property.__validate__(value)
        for value in outside:
            with pytest.raises(Error, match="is not between"):
                _property.__validate__(value)

    def test_check_failures(self):
        _property = config_property(1, check=lambda x: x > 0)
        with pytest.raises(Error, match="property validation failed"):
            _property.__validate__(0)
        with pytest.raises(Error, match="with message") as exc:
            _property.__validate__("one")
        assert isinstance(exc.value.__cause__, TypeError)

    def test_frozen(self, holder):
        instance = holder(version=config_property("1.0", frozen=True))
        with pytest.raises(Error, match="cannot modify frozen") as exc:
            instance.version = "2.0"
        assert "version" in str(exc.value)
        assert instance.version == "1.0"


@pytest.mark.integration
class TestFileLoggerConfig:
    @pytest.fixture
    def config(self):
        return FileLoggerConfig()

    def test_defaults(self, config):
        assert config.enable is False
        assert config.level == "INFO"
        assert config.fmt == _DEFAULT_LOG_FMT
        assert config.path == "logs"
        assert config.output == "ripple.log"
        assert config.encoding == "utf-8"
        assert config.max_size == "10MB"
        assert config.backups == 5

    @pytest.mark.parametrize("level", list(_ALLOWED_LOG_LEVELS))
    def test_level_allowed(self, config, level):
        config.level = level
        assert config.level == level

    @pytest.mark.parametrize("invalid", ["danger", "trace", "verbose"])
    def test_level_invalids(self, config, invalid):
        with pytest.raises(Error):
            config.level = invalid

    @pytest.mark.parametrize("size", ["1KB", "2.5 MB", "1gb", "512"])
    def test_max_size_allowed(self, config, size):
        config.max_size = size
        assert config.max_size == size

    @pytest.mark.parametrize("size", ["huge", "10XB", "MB"])
    def test_max_size_invalids(self, config, size):
        with pytest.raises(Error):
            config.max_size = size

    def test_encoding_frozen(self, config):
        with pytest.raises(Error, match="cannot modify frozen property"):
            config.encoding = "latin-1"

    @pytest.mark.parametrize("backups", [-1, 101])
    def test_backups_range(self, config, backups):
        with pytest.raises(Error, match="is not between"):
            config.backups = backups


@pytest.mark.integration
class TestLoggerConfig:
    @pytest.fixture
    def config(self):
        return LoggerConfig()

    def test_defaults(self, config):
        assert config.level == "WARNING"
        assert config.datefmt == _DEFAULT_LOG_DATEFMT
        assert config.as_json is False
        assert isinstance(config.file, FileLoggerConfig)
        assert isinstance(config.tty, ConsoleLoggerConfig)

    def test_nested_configuration_access(self, config):
        assert config.file.level == "INFO"
        assert config.tty.level == "DEBUG"
        assert config.tty.colour is True

    def test_nested_configurations_are_not_shared(self):
        first, second = LoggerConfig(), LoggerConfig()
        first.tty.level = "ERROR"
        assert second.tty.level == "DEBUG"


@pytest.mark.integration
class TestConfig:
    @pytest.fixture
    def config(self):
        return Config()

    def test_defaults(self, config):
        assert config.name == "ripple"
        assert config.version == "20.8.2025"
        assert config.debug is False
        assert isinstance(config.logger, LoggerConfig)
        assert isinstance(config.telemetry, TelemetryConfig)
        assert config.telemetry.enable is False
        assert config.telemetry.name is None

    def test_name_frozen(self, config):
        with pytest.raises(Error, match="cannot modify frozen property"):
            config.name = "splash"
