"""패키지 import 스모크 테스트."""


def test_package_version():
    """패키지 버전을 조회할 수 있어야 한다."""
    import querybuilder

    assert querybuilder.__version__ == "0.1.0"


def test_import_public_modules():
    """주요 모듈을 import할 수 있어야 한다."""
    from querybuilder.adapters.api import QueryBuilderApiClient
    from querybuilder.builder.select_builder import SelectBuilder
    from querybuilder.services.schema_editor import SchemaEditor

    assert QueryBuilderApiClient is not None
    assert SelectBuilder is not None
    assert SchemaEditor is not None
