"""Tests for file creation, listing, visibility and content lookup."""

import json
import os

import pytest

from common.exceptions import BadRequestError, NotFoundError, ValidationError
from common.models import FileType, ParentRef, User
from server.services.file_service import parse_page
from tests.helpers import b64


@pytest.fixture
async def owner(user_repo):
    return await user_repo.create_user('bob@dylan.com', 'digest')


@pytest.fixture
async def stranger(user_repo):
    return await user_repo.create_user('alice@dylan.com', 'digest')


def pending_jobs(fake_redis):
    return [json.loads(raw) for raw in fake_redis.lists.get('queue:thumbnail generation:pending', [])]


class TestParsePage:

    @pytest.mark.parametrize('value,expected', [
        (None, 0), ('', 0), ('abc', 0), ('-3', 0), ('0', 0), ('2', 2), (5, 5),
    ])
    def test_parse_page(self, value, expected):
        assert parse_page(value) == expected


class TestCreateFile:

    @pytest.mark.asyncio
    async def test_folder_without_data(self, file_service, owner, storage):
        folder = await file_service.create_file(owner, 'images', 'folder')

        assert folder.type == FileType.FOLDER
        assert folder.local_path is None
        assert folder.to_response()['parentId'] == 0
        assert folder.to_response()['isPublic'] is False
        assert os.path.isdir(storage.base_dir)

    @pytest.mark.asyncio
    async def test_file_written_under_base_dir(self, file_service, owner, storage):
        node = await file_service.create_file(owner, 'hello.txt', 'file', data=b64(b'Hello Webstack!\n'))

        assert os.path.dirname(node.local_path) == storage.base_dir
        with open(node.local_path, 'rb') as f:
            assert f.read() == b'Hello Webstack!\n'

    @pytest.mark.asyncio
    async def test_unpadded_base64_is_accepted(self, file_service, owner):
        node = await file_service.create_file(owner, 'hello.txt', 'file', data='aGVsbG8')

        with open(node.local_path, 'rb') as f:
            assert f.read() == b'hello'

    @pytest.mark.asyncio
    async def test_each_upload_gets_its_own_path(self, file_service, owner):
        first = await file_service.create_file(owner, 'a.txt', 'file', data=b64(b'a'))
        second = await file_service.create_file(owner, 'a.txt', 'file', data=b64(b'a'))

        assert first.local_path != second.local_path

    @pytest.mark.asyncio
    @pytest.mark.parametrize('name,file_type,data,message', [
        (None, 'file', 'aGk=', 'Missing name'),
        ('', 'file', 'aGk=', 'Missing name'),
        ('a.txt', None, 'aGk=', 'Missing type'),
        ('a.txt', 'video', 'aGk=', 'Missing type'),
        ('a.txt', 'file', None, 'Missing data'),
        ('a.png', 'image', '', 'Missing data'),
        ('a.txt', 'file', '***', 'Missing data'),
        (None, 'video', None, 'Missing name'),
        (123, 'file', 'aGk=', 'Missing name'),
        ('a.txt', 5, 'aGk=', 'Missing type'),
        ('a.txt', ['file'], 'aGk=', 'Missing type'),
        ('a.txt', 'file', 42, 'Missing data'),
        ('a.txt', 'file', 'a', 'Missing data'),
    ])
    async def test_validation_order(self, file_service, owner, name, file_type, data, message):
        with pytest.raises(ValidationError, match=message):
            await file_service.create_file(owner, name, file_type, data=data)

    @pytest.mark.asyncio
    async def test_parent_not_found(self, file_service, owner):
        with pytest.raises(ValidationError, match='Parent not found'):
            await file_service.create_file(
                owner, 'a.txt', 'file', parent=ParentRef.parse('5f1e7d0c2b9a4e0012345678'), data='aGk='
            )

    @pytest.mark.asyncio
    async def test_malformed_parent_id_is_not_found(self, file_service, owner):
        with pytest.raises(ValidationError, match='Parent not found'):
            await file_service.create_file(owner, 'a.txt', 'file', parent=ParentRef.parse('xyz'), data='aGk=')

    @pytest.mark.asyncio
    async def test_parent_is_not_a_folder(self, file_service, owner):
        plain = await file_service.create_file(owner, 'a.txt', 'file', data='aGk=')

        with pytest.raises(ValidationError, match='Parent is not a folder'):
            await file_service.create_file(
                owner, 'b.txt', 'file', parent=ParentRef.parse(plain.file_id), data='aGk='
            )

    @pytest.mark.asyncio
    async def test_child_of_folder(self, file_service, owner):
        folder = await file_service.create_file(owner, 'docs', 'folder')

        child = await file_service.create_file(
            owner, 'a.txt', 'file', parent=ParentRef.parse(folder.file_id), data='aGk='
        )

        assert child.to_response()['parentId'] == folder.file_id

    @pytest.mark.asyncio
    async def test_parent_owned_by_someone_else_is_accepted(self, file_service, owner, stranger):
        folder = await file_service.create_file(stranger, 'shared', 'folder')

        child = await file_service.create_file(owner, 'x', 'folder', parent=ParentRef.parse(folder.file_id))

        assert child.parent.folder_id is not None

    @pytest.mark.asyncio
    async def test_image_enqueues_job(self, file_service, owner, fake_redis, png_bytes):
        image = await file_service.create_file(owner, 'pic.png', 'image', data=b64(png_bytes))

        assert pending_jobs(fake_redis) == [{
            'userId': owner.user_id,
            'fileId': image.file_id,
            'name': f'Image thumbnail [{owner.user_id}-{image.file_id}]',
        }]

    @pytest.mark.asyncio
    async def test_plain_file_does_not_enqueue(self, file_service, owner, fake_redis):
        await file_service.create_file(owner, 'a.txt', 'file', data='aGk=')

        assert pending_jobs(fake_redis) == []

    @pytest.mark.asyncio
    async def test_enqueue_failure_does_not_fail_upload(self, file_service, owner, fake_redis, fake_db, png_bytes):
        fake_redis.down = True

        image = await file_service.create_file(owner, 'pic.png', 'image', data=b64(png_bytes))

        assert image.file_id
        assert len(fake_db['files'].documents) == 1


class TestGetFile:

    @pytest.mark.asyncio
    async def test_owner_can_get(self, file_service, owner):
        node = await file_service.create_file(owner, 'docs', 'folder')

        fetched = await file_service.get_file(owner, node.file_id)

        assert fetched.to_response() == node.to_response()

    @pytest.mark.asyncio
    async def test_other_owner_gets_not_found(self, file_service, owner, stranger):
        node = await file_service.create_file(owner, 'docs', 'folder')

        with pytest.raises(NotFoundError):
            await file_service.get_file(stranger, node.file_id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize('file_id', ['5f1e7d0c2b9a4e0012345678', 'not-an-id'])
    async def test_unknown_id(self, file_service, owner, file_id):
        with pytest.raises(NotFoundError):
            await file_service.get_file(owner, file_id)


class TestListFiles:

    @pytest.mark.asyncio
    async def test_pagination_in_creation_order(self, file_service, owner):
        created = [await file_service.create_file(owner, f'f{i}', 'folder') for i in range(45)]

        pages = [await file_service.list_files(owner, None, page) for page in (0, 1, 2, 3)]

        assert [len(page) for page in pages] == [20, 20, 5, 0]
        assert [node.file_id for node in pages[1]] == [node.file_id for node in created[20:40]]

    @pytest.mark.asyncio
    async def test_filter_by_root(self, file_service, owner):
        folder = await file_service.create_file(owner, 'docs', 'folder')
        await file_service.create_file(owner, 'a.txt', 'file', parent=ParentRef.parse(folder.file_id), data='aGk=')

        root_nodes = await file_service.list_files(owner, ParentRef.parse('0'), 0)

        assert [node.name for node in root_nodes] == ['docs']

    @pytest.mark.asyncio
    async def test_filter_by_folder(self, file_service, owner):
        folder = await file_service.create_file(owner, 'docs', 'folder')
        await file_service.create_file(owner, 'a.txt', 'file', parent=ParentRef.parse(folder.file_id), data='aGk=')
        await file_service.create_file(owner, 'b.txt', 'file', data='aGk=')

        children = await file_service.list_files(owner, ParentRef.parse(folder.file_id), 0)

        assert [node.name for node in children] == ['a.txt']

    @pytest.mark.asyncio
    async def test_only_own_files(self, file_service, owner, stranger):
        await file_service.create_file(owner, 'mine', 'folder')
        await file_service.create_file(stranger, 'theirs', 'folder')

        assert [node.name for node in await file_service.list_files(owner, None, 0)] == ['mine']

    @pytest.mark.asyncio
    async def test_malformed_parent_lists_nothing(self, file_service, owner):
        await file_service.create_file(owner, 'mine', 'folder')

        assert await file_service.list_files(owner, ParentRef.parse('xyz'), 0) == []


class TestSetPublic:

    @pytest.mark.asyncio
    async def test_publish_and_unpublish(self, file_service, owner):
        node = await file_service.create_file(owner, 'a.txt', 'file', data='aGk=')

        published = await file_service.set_public(owner, node.file_id, True)
        assert published.is_public is True
        assert (await file_service.get_file(owner, node.file_id)).is_public is True

        unpublished = await file_service.set_public(owner, node.file_id, False)
        assert unpublished.is_public is False
        assert (await file_service.get_file(owner, node.file_id)).is_public is False

    @pytest.mark.asyncio
    async def test_other_owner_cannot_publish(self, file_service, owner, stranger):
        node = await file_service.create_file(owner, 'a.txt', 'file', data='aGk=')

        with pytest.raises(NotFoundError):
            await file_service.set_public(stranger, node.file_id, True)
        assert (await file_service.get_file(owner, node.file_id)).is_public is False


class TestReadContent:

    @pytest.mark.asyncio
    async def test_owner_reads_private_file(self, file_service, owner):
        node = await file_service.create_file(owner, 'hello.txt', 'file', data=b64(b'hi'))

        path, content_type = await file_service.read_content(owner, node.file_id)

        assert path == node.local_path
        assert content_type == 'text/plain'

    @pytest.mark.asyncio
    async def test_anonymous_sees_public_file_only(self, file_service, owner):
        node = await file_service.create_file(owner, 'hello.txt', 'file', data=b64(b'hi'))

        with pytest.raises(NotFoundError):
            await file_service.read_content(None, node.file_id)

        await file_service.set_public(owner, node.file_id, True)
        path, _ = await file_service.read_content(None, node.file_id)
        assert path == node.local_path

        await file_service.set_public(owner, node.file_id, False)
        with pytest.raises(NotFoundError):
            await file_service.read_content(None, node.file_id)

    @pytest.mark.asyncio
    async def test_other_user_sees_private_file_as_missing(self, file_service, owner, stranger):
        node = await file_service.create_file(owner, 'hello.txt', 'file', data=b64(b'hi'))

        with pytest.raises(NotFoundError):
            await file_service.read_content(stranger, node.file_id)

    @pytest.mark.asyncio
    async def test_folder_has_no_content(self, file_service, owner):
        folder = await file_service.create_file(owner, 'docs', 'folder', is_public=True)

        with pytest.raises(BadRequestError, match="A folder doesn't have content"):
            await file_service.read_content(None, folder.file_id)

    @pytest.mark.asyncio
    async def test_unknown_extension_defaults_to_text_plain(self, file_service, owner):
        node = await file_service.create_file(owner, 'README', 'file', data=b64(b'hi'))

        _, content_type = await file_service.read_content(owner, node.file_id)

        assert content_type == 'text/plain; charset=utf-8'

    @pytest.mark.asyncio
    async def test_missing_derivative(self, file_service, owner, png_bytes):
        image = await file_service.create_file(owner, 'pic.png', 'image', data=b64(png_bytes))

        with pytest.raises(NotFoundError):
            await file_service.read_content(owner, image.file_id, '250')

    @pytest.mark.asyncio
    async def test_existing_derivative(self, file_service, owner, png_bytes):
        image = await file_service.create_file(owner, 'pic.png', 'image', data=b64(png_bytes))
        with open(f'{image.local_path}_100', 'wb') as f:
            f.write(b'thumb')

        path, content_type = await file_service.read_content(owner, image.file_id, '100')

        assert path == f'{image.local_path}_100'
        assert content_type == 'image/png'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('size', ['42', '²', '١٠٠', ' 100', 'abc'])
    async def test_unsupported_size(self, file_service, owner, size):
        node = await file_service.create_file(owner, 'a.txt', 'file', data=b64(b'hi'))

        with pytest.raises(NotFoundError):
            await file_service.read_content(owner, node.file_id, size)

    @pytest.mark.asyncio
    async def test_original_removed_from_disk(self, file_service, owner):
        node = await file_service.create_file(owner, 'a.txt', 'file', data=b64(b'hi'))
        os.remove(node.local_path)

        with pytest.raises(NotFoundError):
            await file_service.read_content(owner, node.file_id)

    @pytest.mark.asyncio
    async def test_unknown_file(self, file_service):
        with pytest.raises(NotFoundError):
            await file_service.read_content(User('x', 'x@y.z', 'd'), '5f1e7d0c2b9a4e0012345678')
