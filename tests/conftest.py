"""Pytest fixtures for onedrivepy tests."""
import json
from unittest.mock import AsyncMock, Mock

import pytest

from onedrivepy.core.api import APIConfig, GraphResponse
from onedrivepy.core.models import UploadSessionInfo


UPLOAD_URL = 'http://uplo.ad/url'


@pytest.fixture
def json_response():
    """Factory building a GraphResponse with a JSON body."""
    def build(status, payload, headers=None):
        return GraphResponse(
            status=status,
            headers=headers or {'Content-Type': 'application/json'},
            content=json.dumps(payload).encode('utf-8')
        )
    return build


@pytest.fixture
def graph():
    """Mock transport; set graph.request.side_effect to script responses."""
    transport = Mock()
    transport.config = APIConfig.default()
    transport.request = AsyncMock()
    return transport


@pytest.fixture
def session_info():
    """Upload session handle as returned by createUploadSession."""
    return UploadSessionInfo(upload_url=UPLOAD_URL)


@pytest.fixture
def sample_file_data():
    """Returns a sample drive item payload for a file."""
    return {
        'id': '123abc',
        'name': 'report.pdf',
        'size': 327681,
        'eTag': '"{ETAG},1"',
        'cTag': '"c:{CTAG},1"',
        'webUrl': 'https://onedrive.live.com/?id=123abc',
        'createdDateTime': '2024-01-15T10:30:00Z',
        'lastModifiedDateTime': '2024-01-16T08:00:00.1234567Z',
        'createdBy': {'user': {'id': 'u1', 'displayName': 'Jane Doe'}},
        'parentReference': {
            'driveId': 'drive1',
            'driveType': 'personal',
            'id': 'parent1',
            'path': '/drive/root:',
        },
        'file': {
            'mimeType': 'application/pdf',
            'hashes': {'sha1Hash': 'ABCDEF'},
        },
    }


@pytest.fixture
def sample_folder_data():
    """Returns a sample drive item payload for a folder."""
    return {
        'id': 'folder1',
        'name': 'Documents',
        'size': 2048,
        'parentReference': {'driveId': 'drive1', 'id': 'root1', 'path': '/drive/root:'},
        'folder': {'childCount': 2},
    }


@pytest.fixture
def sample_drive_data():
    """Returns a sample drive payload."""
    return {
        'id': 'drive1',
        'driveType': 'personal',
        'name': 'OneDrive',
        'owner': {'user': {'id': 'u1', 'displayName': 'Jane Doe'}},
        'quota': {
            'total': 1000,
            'used': 250,
            'remaining': 750,
            'deleted': 10,
            'state': 'normal',
        },
    }
