import pytest

from sim.core.models.config import AppConfig
from sim.core.models.errors import ConfigurationError


def dynamodb_env(**overrides: str) -> dict[str, str]:
    env = {"REGION": "us-east-1", "STORAGE": "sim", "TABLE_NAME": "sim-images"}
    env.update(overrides)
    return env


def couchbase_env(**overrides: str) -> dict[str, str]:
    env = {
        "REGION": "us-east-1",
        "STORAGE": "sim",
        "METADATA_BACKEND": "couchbase",
        "COUCHBASE_ENDPOINT": "couchbase://localhost",
        "COUCHBASE_USERNAME": "admin",
        "COUCHBASE_PASSWORD": "password",
        "COUCHBASE_BUCKET": "images",
    }
    env.update(overrides)
    return env


class TestAppConfigFromEnv:
    def test_dynamodb_defaults(self) -> None:
        config = AppConfig.from_env(dynamodb_env())

        assert config.region == "us-east-1"
        assert config.storage == "sim"
        assert config.table_name == "sim-images"
        assert config.metadata_backend == "dynamodb"
        assert config.debug is False
        assert config.localstack_url is None
        assert config.couchbase is None
        assert config.effective_log_level == "WARNING"

    def test_reads_os_environ_by_default(self, aws_env) -> None:
        config = AppConfig.from_env()

        assert config.storage == aws_env["STORAGE"]

    def test_debug_flag(self) -> None:
        config = AppConfig.from_env(dynamodb_env(DEBUG="true", LOG_LEVEL="error"))

        assert config.debug is True
        assert config.effective_log_level == "DEBUG"

    def test_log_level(self) -> None:
        config = AppConfig.from_env(dynamodb_env(LOG_LEVEL="info"))

        assert config.effective_log_level == "INFO"

    def test_localstack_url(self) -> None:
        config = AppConfig.from_env(dynamodb_env(LOCALSTACK_URL="http://localhost:4566"))

        assert config.localstack_url == "http://localhost:4566"

    def test_missing_variables_are_all_reported(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env({"TABLE_NAME": "sim-images"})

        err = exc_info.value
        assert err.message == "Missing required environment variables: REGION, STORAGE"
        assert err.details == {"missing": ["REGION", "STORAGE"]}

    def test_blank_values_count_as_missing(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env(dynamodb_env(STORAGE="  "))

        assert exc_info.value.details == {"missing": ["STORAGE"]}

    def test_dynamodb_requires_table_name(self) -> None:
        env = dynamodb_env()
        del env["TABLE_NAME"]

        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env(env)

        assert "TABLE_NAME" in exc_info.value.message

    def test_unknown_backend(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env(dynamodb_env(METADATA_BACKEND="mongodb"))

        assert "mongodb" in exc_info.value.message

    def test_backend_name_is_case_insensitive(self) -> None:
        config = AppConfig.from_env(couchbase_env(METADATA_BACKEND="Couchbase"))

        assert config.metadata_backend == "couchbase"

    def test_couchbase_settings(self) -> None:
        config = AppConfig.from_env(couchbase_env())

        assert config.couchbase is not None
        assert config.couchbase.endpoint == "couchbase://localhost"
        assert config.couchbase.bucket == "images"
        assert config.couchbase.scope == "_default"
        assert config.couchbase.collection == "_default"
        assert config.table_name is None

    def test_couchbase_scope_and_collection(self) -> None:
        config = AppConfig.from_env(
            couchbase_env(COUCHBASE_SCOPE="media", COUCHBASE_COLLECTION="records")
        )

        assert config.couchbase.scope == "media"
        assert config.couchbase.collection == "records"

    def test_couchbase_missing_credentials(self) -> None:
        env = couchbase_env()
        del env["COUCHBASE_USERNAME"]
        del env["COUCHBASE_PASSWORD"]

        with pytest.raises(ConfigurationError) as exc_info:
            AppConfig.from_env(env)

        assert exc_info.value.details == {"missing": ["COUCHBASE_USERNAME", "COUCHBASE_PASSWORD"]}

    def test_password_not_in_repr(self) -> None:
        config = AppConfig.from_env(couchbase_env(COUCHBASE_PASSWORD="s3cr3t"))

        assert "s3cr3t" not in repr(config)
