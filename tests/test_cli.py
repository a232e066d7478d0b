"""
Tests for the command line entry point.
"""

import logging

import httpx
import pytest

from conftest import StubTelegram
from telegram_forwarder import cli
from telegram_forwarder.uploader import TelegramUploadClient


@pytest.fixture
def stub_upload_client(monkeypatch):
    """Make the plugin build upload clients that talk to a stub."""
    stub = StubTelegram()

    def factory():
        return TelegramUploadClient(http_client=httpx.Client(transport=httpx.MockTransport(stub)))

    monkeypatch.setattr('telegram_forwarder.plugin.TelegramUploadClient', factory)
    return stub


class TestBuildResolver:

    def test_registers_content_roots(self, content_dir):
        resolver = cli.build_resolver([f"valid={content_dir}"])

        assert resolver.query_display_name('content://valid/doc.pdf') == 'doc.pdf'

    @pytest.mark.parametrize('spec', ['valid', '=dir', 'valid='])
    def test_rejects_bad_spec(self, spec):
        with pytest.raises(ValueError):
            cli.build_resolver([spec])


class TestMain:

    def test_forward_success(self, stub_upload_client, content_dir, tmp_path, capsys):
        code = cli.main([
            'content://valid/doc.pdf',
            '--token', '123:ABC',
            '--chat-id', '456',
            '--content-root', f"valid={content_dir}",
            '--cache-dir', str(tmp_path / 'cache'),
        ])

        assert code == 0
        assert '[OK]' in capsys.readouterr().out
        assert len(stub_upload_client.requests) == 1

    def test_missing_token(self, stub_upload_client, content_dir, capsys):
        code = cli.main([str(content_dir / 'doc.pdf'), '--chat-id', '456'])

        assert code == 1
        assert 'INVALID_ARGUMENTS' in capsys.readouterr().out
        assert stub_upload_client.requests == []

    def test_missing_file(self, stub_upload_client, tmp_path, capsys):
        code = cli.main([
            str(tmp_path / 'missing.pdf'),
            '--token', '123:ABC',
            '--chat-id', '456',
            '--cache-dir', str(tmp_path / 'cache'),
        ])

        assert code == 1
        assert 'FILE_NOT_FOUND' in capsys.readouterr().out

    def test_token_not_logged(self, stub_upload_client, content_dir, tmp_path, caplog):
        """Test the bot token never shows up in log records, httpx's included."""
        caplog.set_level(logging.INFO)
        try:
            code = cli.main([
                'content://valid/doc.pdf',
                '--token', 'SECRET:TOKEN',
                '--chat-id', '456',
                '--content-root', f"valid={content_dir}",
                '--cache-dir', str(tmp_path / 'cache'),
            ])
        finally:
            logging.getLogger('httpx').setLevel(logging.NOTSET)
            logging.getLogger('httpcore').setLevel(logging.NOTSET)

        assert code == 0
        assert len(stub_upload_client.requests) == 1
        assert caplog.records
        for record in caplog.records:
            assert 'SECRET:TOKEN' not in record.getMessage()
