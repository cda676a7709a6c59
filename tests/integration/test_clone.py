"""Integration tests for the clone command."""

from unittest.mock import Mock, patch

from click.testing import CliRunner

from plumb.cli.commands.clone import default_directory
from plumb.cli.main import cli
from plumb.remote.protocol import NAK_LINE

URL = 'https://example.com/user/project.git'


def _response(text='', content=b''):
    response = Mock()
    response.status_code = 200
    response.text = text
    response.content = content
    return response


def test_default_directory():
    assert default_directory(URL) == 'project'
    assert default_directory('https://example.com/user/tool/') == 'tool'
    assert default_directory('https://example.com/') == 'example.com'


@patch('requests.post')
@patch('requests.get')
def test_clone_command(mock_get, mock_post, temp_dir, make_advertisement,
                       remote_pack, remote_objects):
    commit = remote_objects['commit']
    mock_get.return_value = _response(text=make_advertisement(
        [(commit.hash, 'HEAD'), (commit.hash, 'refs/heads/master')]))
    mock_post.return_value = _response(content=NAK_LINE + remote_pack)
    dest = temp_dir / 'checkout'

    result = CliRunner().invoke(cli, ['clone', URL, str(dest)])

    assert result.exit_code == 0
    assert 'Cloned repository with 6 objects' in result.output
    assert "Checked out branch 'master'" in result.output
    assert (dest / 'README.md').read_text() == '# project\n'


@patch('requests.post')
@patch('requests.get')
def test_clone_command_infers_directory(mock_get, mock_post, temp_dir, monkeypatch,
                                        make_advertisement, remote_pack, remote_objects):
    commit = remote_objects['commit']
    mock_get.return_value = _response(text=make_advertisement([(commit.hash, 'HEAD')]))
    mock_post.return_value = _response(content=NAK_LINE + remote_pack)
    monkeypatch.chdir(temp_dir)

    result = CliRunner().invoke(cli, ['clone', URL])

    assert result.exit_code == 0
    assert 'HEAD detached at' in result.output
    assert (temp_dir / 'project' / 'src' / 'nested.txt').exists()


@patch('requests.get')
def test_clone_command_failure(mock_get, temp_dir):
    mock_get.return_value = Mock(status_code=404)

    result = CliRunner().invoke(cli, ['clone', URL, str(temp_dir / 'gone')])

    assert result.exit_code != 0
    assert 'Failed to clone repository' in result.output
    assert not (temp_dir / 'gone').exists()
