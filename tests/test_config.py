import json

import pytest
import yaml
from pydantic import ValidationError

from vpacker.archive.format import MAX_PAYLOAD_LIMIT
from vpacker.config.loader import load_config
from vpacker.config.schema import AppConfig, ArchiveConfig, OutputConfig


def test_defaults():
    cfg = load_config(None)
    assert isinstance(cfg, AppConfig)
    assert cfg.archive.magic_bytes == b"VPVP"
    assert cfg.archive.version == 2
    assert cfg.archive.max_payload_bytes == 1_000_000_000
    assert cfg.archive.root_name == "data"
    assert cfg.input.data_directory == "data"
    assert cfg.output.extension == "vp"
    assert cfg.logging.level == "INFO"


@pytest.mark.parametrize('format', ['yaml', 'json'])
def test_config_loading(tmp_path, format):
    cfg = {
        'logging': {'level': 'debug', 'file': 'run.log'},
        'archive': {'magic': 'ABCD', 'version': 3, 'max_payload_bytes': 4096, 'root_name': None},
        'input': {'data_directory': 'assets'},
        'output': {'directory': 'out', 'extension': '.pak'},
    }
    path = tmp_path / f'config.{format}'
    if format == 'yaml':
        path.write_text(yaml.safe_dump(cfg))
    else:
        path.write_text(json.dumps(cfg))

    app_cfg = load_config(str(path))

    assert app_cfg.logging.level == 'DEBUG'
    assert app_cfg.archive.magic_bytes == b'ABCD'
    assert app_cfg.archive.max_payload_bytes == 4096
    assert app_cfg.archive.root_name is None
    assert app_cfg.input.data_directory == 'assets'
    assert app_cfg.output.extension == 'pak'


def test_empty_yaml_means_defaults(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert load_config(str(path)) == AppConfig()


def test_yaml_with_tabs_loads(tmp_path):
    path = tmp_path / "tabs.yaml"
    path.write_text("archive:\n\tmax_payload_bytes: 10\n", encoding="utf-8")
    assert load_config(str(path)).archive.max_payload_bytes == 10


def test_unsupported_extension(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text("")
    with pytest.raises(ValueError):
        load_config(str(path))


@pytest.mark.parametrize('bad', [
    {'magic': 'VPV'},
    {'magic': 'VPVPX'},
    {'max_payload_bytes': -1},
    {'max_payload_bytes': MAX_PAYLOAD_LIMIT + 1},
    {'version': 2 ** 31},
    {'root_name': '..'},
    {'root_name': 'r' * 32},
])
def test_invalid_archive_settings(bad):
    with pytest.raises(ValidationError):
        ArchiveConfig(**bad)


def test_empty_root_name_disables_wrapping():
    assert ArchiveConfig(root_name='').root_name is None


def test_invalid_data_directory_and_level():
    with pytest.raises(ValidationError):
        AppConfig.model_validate({'input': {'data_directory': 'a/b'}})
    with pytest.raises(ValidationError):
        AppConfig.model_validate({'logging': {'level': 'LOUD'}})
    with pytest.raises(ValidationError):
        OutputConfig(extension='.')
