"""Tests for drive and drive item proxies."""
from unittest.mock import Mock

import pytest

from onedrivepy.core.api import GraphResponse
from onedrivepy.core.exceptions import UnexpectedStatusError
from onedrivepy.core.models import Drive, DriveItem
from onedrivepy.core.proxy import DriveItemProxy, DriveProxy
from onedrivepy.core.upload import UploadSession


@pytest.fixture
def folder(graph, sample_folder_data):
    """Folder proxy on drive1."""
    return DriveItemProxy(graph, DriveItem.from_dict(sample_folder_data))


class TestDriveItemProxyProperties:
    """Test suite for proxy properties."""

    def test_loaded_proxy(self, folder):
        assert folder.is_loaded
        assert folder.id == 'folder1'
        assert folder.name == 'Documents'
        assert folder.is_folder
        assert folder.drive_id == 'drive1'
        assert folder.endpoint == '/drives/drive1/items/folder1'

    def test_proxy_from_id(self, graph):
        """Test a proxy built from an id only."""
        proxy = DriveItemProxy(graph, 'abc')

        assert not proxy.is_loaded
        assert proxy.name is None
        assert not proxy.is_file
        assert proxy.raw == {}
        assert proxy.endpoint == '/me/drive/items/abc'

    def test_explicit_drive_id(self, graph):
        proxy = DriveItemProxy(graph, 'abc', drive_id='d2')

        assert proxy.endpoint == '/drives/d2/items/abc'


class TestDriveItemProxyLoading:
    """Test suite for lazy loading."""

    @pytest.mark.asyncio
    async def test_load(self, graph, json_response, sample_file_data):
        graph.request.return_value = json_response(200, sample_file_data)
        proxy = DriveItemProxy(graph, '123abc')

        await proxy.load()

        assert proxy.is_loaded
        assert proxy.name == 'report.pdf'
        graph.request.assert_awaited_once_with('GET', '/me/drive/items/123abc')

    @pytest.mark.asyncio
    async def test_load_is_cached(self, graph, folder):
        await folder.load()

        graph.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_children_cached(self, graph, folder, json_response, sample_file_data):
        """Test children are fetched once."""
        graph.request.return_value = json_response(200, {'value': [sample_file_data]})

        first = await folder.children()
        second = await folder.children()

        assert [child.name for child in first] == ['report.pdf']
        assert first is second
        graph.request.assert_awaited_once_with('GET', '/drives/drive1/items/folder1/children')

    @pytest.mark.asyncio
    async def test_children_refresh(self, graph, folder, json_response):
        graph.request.return_value = json_response(200, {'value': []})

        await folder.children()
        await folder.children(refresh=True)

        assert graph.request.await_count == 2

    @pytest.mark.asyncio
    async def test_children_unexpected_status(self, graph, folder):
        graph.request.return_value = GraphResponse(404)

        with pytest.raises(UnexpectedStatusError) as exc_info:
            await folder.children()

        assert str(exc_info.value) == (
            "Unexpected status code produced by 'GET /drives/drive1/items/folder1/children': 404"
        )


class TestDriveItemProxyOperations:
    """Test suite for drive item operations."""

    @pytest.mark.asyncio
    async def test_create_folder(self, graph, folder, json_response):
        graph.request.return_value = json_response(201, {'id': 'new1', 'name': 'Reports', 'folder': {}})

        created = await folder.create_folder('Reports', description='Q1', conflict_behavior='rename')

        assert created.id == 'new1'
        assert created.is_folder
        method, endpoint = graph.request.await_args.args
        assert (method, endpoint) == ('POST', '/drives/drive1/items/folder1/children')
        assert graph.request.await_args.kwargs['json'] == {
            'name': 'Reports',
            'folder': {'@odata.type': 'microsoft.graph.folder'},
            'description': 'Q1',
            '@microsoft.graph.conflictBehavior': 'rename',
        }

    @pytest.mark.asyncio
    async def test_delete(self, graph, folder):
        graph.request.return_value = GraphResponse(204)

        await folder.delete()

        graph.request.assert_awaited_once_with('DELETE', '/drives/drive1/items/folder1')

    @pytest.mark.asyncio
    async def test_delete_unexpected_status(self, graph, folder):
        graph.request.return_value = GraphResponse(403)

        with pytest.raises(UnexpectedStatusError):
            await folder.delete()

    @pytest.mark.asyncio
    async def test_simple_upload(self, graph, folder, json_response):
        """Test names are percent-encoded in the content path."""
        graph.request.return_value = json_response(201, {'id': 'f1', 'name': 'my notes.txt'})

        item = await folder.upload('my notes.txt', 'hello', content_type='text/plain')

        assert item.id == 'f1'
        call = graph.request.await_args
        assert call.args == ('PUT', '/drives/drive1/items/folder1:/my%20notes.txt:/content')
        assert call.kwargs['body'] == b'hello'
        assert call.kwargs['headers'] == {'Content-Type': 'text/plain'}

    @pytest.mark.asyncio
    async def test_start_upload(self, graph, folder, json_response):
        graph.request.return_value = json_response(200, {
            'uploadUrl': 'http://uplo.ad/url',
            'expirationDateTime': '2030-01-01T00:00:00Z',
        })

        session = await folder.start_upload('video.mp4', b'x' * 10, content_type='video/mp4', range_size=700000)

        assert isinstance(session, UploadSession)
        assert session.upload_url == 'http://uplo.ad/url'
        assert session.range_size == 655360
        assert session.content_type == 'video/mp4'
        assert graph.request.await_args.args == (
            'POST', '/drives/drive1/items/folder1:/video.mp4:/createUploadSession'
        )

    @pytest.mark.asyncio
    async def test_start_upload_uses_default_range_size(self, graph, folder, json_response):
        graph.config.default_range_size = 327680 * 4
        graph.request.return_value = json_response(200, {'uploadUrl': 'http://uplo.ad/url'})

        session = await folder.start_upload('a.bin', b'x')

        assert session.range_size == 1310720

    @pytest.mark.asyncio
    async def test_start_upload_conflict_behavior(self, graph, folder, json_response):
        graph.request.return_value = json_response(200, {'uploadUrl': 'http://uplo.ad/url'})

        await folder.start_upload('a.bin', b'x', conflict_behavior='replace')

        assert graph.request.await_args.kwargs['json'] == {
            'item': {'@microsoft.graph.conflictBehavior': 'replace'}
        }

    @pytest.mark.asyncio
    async def test_start_upload_rejects_content_before_creating_session(self, graph, folder, tmp_path):
        """Test invalid content fails without creating a server-side session."""
        with pytest.raises(ValueError, match="size must be known"):
            await folder.start_upload('a.bin', Mock(spec=['read']))

        with pytest.raises(TypeError):
            await folder.start_upload('a.bin', 42)

        with pytest.raises(FileNotFoundError):
            await folder.start_upload('a.bin', tmp_path / 'missing.bin')

        graph.request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_start_upload_with_explicit_size(self, graph, folder, json_response):
        """Test a stream that cannot be measured, sized by the caller."""
        graph.request.return_value = json_response(200, {'uploadUrl': 'http://uplo.ad/url'})
        stream = Mock(spec=['read'])

        session = await folder.start_upload('a.bin', stream, size=10)

        assert session.content.size == 10

    @pytest.mark.asyncio
    async def test_upload_large_with_explicit_size(self, graph, folder, json_response):
        stream = Mock(spec=['read'])
        stream.read.side_effect = [b'x' * 5, b'']
        graph.request.side_effect = [
            json_response(200, {'uploadUrl': 'http://uplo.ad/url'}),
            json_response(201, {'id': 's1', 'size': 5}),
        ]

        item = await folder.upload_large('s.bin', stream, size=5)

        assert item.id == 's1'
        assert graph.request.await_args.kwargs['headers']['Content-Range'] == 'bytes 0-4/5'

    @pytest.mark.asyncio
    async def test_upload_large(self, graph, folder, json_response):
        """Test session creation followed by range uploads."""
        graph.request.side_effect = [
            json_response(200, {'uploadUrl': 'http://uplo.ad/url'}),
            GraphResponse(202),
            json_response(201, {'id': 'big1', 'size': 327681}),
        ]

        item = await folder.upload_large('big.bin', b'x' * 327681)

        assert item.id == 'big1'
        assert item.size == 327681
        assert graph.request.await_count == 3

    @pytest.mark.asyncio
    async def test_download(self, graph, folder):
        graph.request.return_value = GraphResponse(200, content=b'file content')

        assert await folder.download() == b'file content'
        graph.request.assert_awaited_once_with('GET', '/drives/drive1/items/folder1/content')

    @pytest.mark.asyncio
    async def test_iter_download(self, graph, folder):
        async def stream(method, endpoint, chunk_size):
            assert (method, endpoint, chunk_size) == ('GET', '/drives/drive1/items/folder1/content', 4)
            for chunk in (b'ab', b'cd'):
                yield chunk

        graph.stream = stream

        chunks = [chunk async for chunk in folder.iter_download(chunk_size=4)]

        assert chunks == [b'ab', b'cd']

    @pytest.mark.asyncio
    async def test_rename(self, graph, folder, json_response, sample_folder_data):
        graph.request.return_value = json_response(200, dict(sample_folder_data, name='Renamed'))

        result = await folder.rename('Renamed')

        assert result is folder
        assert folder.name == 'Renamed'
        assert graph.request.await_args.args == ('PATCH', '/drives/drive1/items/folder1')
        assert graph.request.await_args.kwargs['json'] == {'name': 'Renamed'}

    @pytest.mark.asyncio
    async def test_move(self, graph, folder, json_response, sample_folder_data):
        graph.request.return_value = json_response(200, sample_folder_data)
        destination = DriveItemProxy(graph, 'dest1')

        await folder.move(destination, name='Moved')

        assert graph.request.await_args.kwargs['json'] == {
            'parentReference': {'id': 'dest1'},
            'name': 'Moved',
        }

    @pytest.mark.asyncio
    async def test_copy(self, graph, folder):
        graph.request.return_value = GraphResponse(202, headers={'Location': 'https://monitor/123'})

        location = await folder.copy('dest1')

        assert location == 'https://monitor/123'
        assert graph.request.await_args.args == ('POST', '/drives/drive1/items/folder1/copy')
        assert graph.request.await_args.kwargs['json'] == {'parentReference': {'id': 'dest1'}}

    @pytest.mark.asyncio
    async def test_copy_unexpected_status(self, graph, folder):
        graph.request.return_value = GraphResponse(200)

        with pytest.raises(UnexpectedStatusError):
            await folder.copy('dest1')


class TestDriveProxy:
    """Test suite for DriveProxy."""

    @pytest.mark.asyncio
    async def test_properties_and_root(self, graph, json_response, sample_drive_data, sample_folder_data):
        drive = DriveProxy(graph, Drive.from_dict(sample_drive_data))
        graph.request.return_value = json_response(200, sample_folder_data)

        root = await drive.get_root()

        assert drive.id == 'drive1'
        assert drive.quota.total == 1000
        assert root.id == 'folder1'
        graph.request.assert_awaited_once_with('GET', '/drives/drive1/items/root')
