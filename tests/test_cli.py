"""
Tests for the command-line entry point
"""
import json

import pytest

import main
from esp_adapter import MailchimpAdapter

CONFIG_TEMPLATE = """
adapter: mailchimp
log_level: DEBUG
mailchimp:
  api_key: "${ENV:TEST_MAILCHIMP_KEY}"
  timeout: 5
  write_timeout: 5
"""


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.setenv('TEST_MAILCHIMP_KEY', 'TEST-us21')
    path = tmp_path / 'config.yaml'
    path.write_text(CONFIG_TEMPLATE, encoding='utf-8')
    return path


@pytest.fixture
def stubbed_factory(monkeypatch, stub_server):
    """Route adapters built by the CLI through the stub server"""
    built = []

    def factory(name, cfg):
        adapter = MailchimpAdapter(
            cfg['mailchimp']['api_key'],
            config=cfg['mailchimp'],
            http_transport=stub_server.transport(),
        )
        built.append(adapter)
        return adapter

    monkeypatch.setattr(main, 'make_adapter', factory)
    return built


class TestConfigLoading:

    def test_env_placeholders_expanded(self, config_file):
        cfg = main.load_config(config_file)
        assert cfg['mailchimp']['api_key'] == 'TEST-us21'
        main.validate_config(cfg)

    def test_missing_env_var(self, config_file, monkeypatch):
        monkeypatch.delenv('TEST_MAILCHIMP_KEY')
        with pytest.raises(RuntimeError):
            main.load_config(config_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            main.load_config(tmp_path / 'nope.yaml')

    def test_missing_keys(self):
        with pytest.raises(ValueError, match='mailchimp'):
            main.validate_config({'adapter': 'mailchimp'})

    def test_param_parsing(self):
        assert main.parse_params(['count=10', 'fields=lists.id,lists.name']) == {
            'count': '10',
            'fields': 'lists.id,lists.name',
        }
        with pytest.raises(ValueError):
            main.parse_params(['count'])


class TestMain:

    def test_lists_prints_json(self, config_file, stubbed_factory, stub_server, load_fixture, capsys):
        stub_server.queue(200, load_fixture('lists.json'))

        code = main.main(['--config', str(config_file), 'lists', '--param', 'count=1'])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output['lists'][0]['id'] == 'a354d4c865'
        assert dict(stub_server.requests[0].url.params) == {'count': '1'}
        assert stubbed_factory[0].config.timeout == 5

    def test_list_metrics_not_found(self, config_file, stubbed_factory, stub_server, load_fixture, capsys):
        stub_server.queue(404, load_fixture('resource_not_found.json'))

        code = main.main(['--config', str(config_file), 'list-metrics', 'test123'])

        assert code == 1
        err = capsys.readouterr().err
        assert '[not_found]' in err
        assert 'status=404' in err

    def test_bad_config_exits_non_zero(self, tmp_path, capsys):
        code = main.main(['--config', str(tmp_path / 'missing.yaml'), 'lists'])

        assert code == 1
        assert 'missing.yaml' in capsys.readouterr().err
