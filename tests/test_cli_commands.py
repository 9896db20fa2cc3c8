"""Tests for CLI command handlers."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from aas_sdk import AasClient
from aas_sdk.exceptions import RemoteError
from aas_sdk.schemas import Collection, FilePart, Order, RemoteFile, ShipTo
from cli.commands import (
    dispatch_command,
    handle_complete_collection,
    handle_create_collection,
    handle_create_order,
    handle_delete_file,
    handle_list_collections,
    handle_list_files,
    handle_list_orders,
    handle_list_parts,
    handle_show_order,
    handle_upload,
)
from cli.models import (
    CompleteCollectionCommand,
    CreateCollectionCommand,
    CreateOrderCommand,
    DeleteFileCommand,
    ListCollectionsCommand,
    ListFilesCommand,
    ListOrdersCommand,
    ListPartsCommand,
    ShowOrderCommand,
    UploadCommand,
)
from cli.parser import ParseError

SHIP_TO = ShipTo(
    recipient='John Smith',
    address1='1 Main St.',
    city='San Francisco',
    state='CA',
    postal_code='94111',
    phone_number='(415) 555 1212',
)


def make_collection(**overrides):
    values = {
        'id': 'c1',
        'type': 'dvd_4_7G',
        'upload_status': 'ready',
        'bytes': 1536,
        'bytes_left': 4 * 1024 ** 3,
        'expires_at': datetime(2024, 6, 1, 12, 0),
    }
    values.update(overrides)
    return Collection(**values)


def make_order(**overrides):
    values = {
        'id': 'o1',
        'collection_id': 'c1',
        'title': 'Summer',
        'status': 'received',
        'ship_to': SHIP_TO,
        'total': '19.99',
    }
    values.update(overrides)
    return Order(**values)


@pytest.fixture
def mock_client():
    return Mock(spec=AasClient)


def test_handle_list_collections(mock_client):
    mock_client.list_collections.return_value = [make_collection()]

    result = handle_list_collections(ListCollectionsCommand(), client=mock_client)

    lines = result.splitlines()
    assert lines[0].split() == ['ID', 'TYPE', 'STATUS', 'USED', 'LEFT', 'EXPIRES']
    assert 'c1' in lines[2]
    assert '1.50 KiB' in lines[2]
    assert '4.00 GiB' in lines[2]
    assert '2024-06-01 12:00' in lines[2]


def test_handle_list_collections_empty(mock_client):
    mock_client.list_collections.return_value = []

    assert handle_list_collections(ListCollectionsCommand(), client=mock_client) == "No collections found."


def test_handle_create_collection(mock_client):
    mock_client.create_collection.return_value = make_collection(type='blueray_25G')

    result = handle_create_collection(CreateCollectionCommand('blueray_25G'), client=mock_client)

    assert result == "Created collection c1 (blueray_25G)"
    mock_client.create_collection.assert_called_once_with('blueray_25G')


def test_handle_complete_collection(mock_client):
    mock_client.complete_collection.return_value = make_collection(upload_status='complete')

    result = handle_complete_collection(CompleteCollectionCommand('c1'), client=mock_client)

    assert 'marked complete' in result


def test_handle_list_files_with_total(mock_client):
    mock_client.list_files.return_value = [
        RemoteFile(id='f1', collection_id='c1', path='/a.mp4', chunked_status='none', bytes=1024),
        RemoteFile(id='f2', collection_id='c1', path='/b.mp4', chunked_status='merged', bytes=2048),
    ]

    result = handle_list_files(ListFilesCommand('c1'), client=mock_client)

    assert '/a.mp4' in result
    assert 'merged' in result
    assert result.endswith('2 file(s), 3.00 KiB total')
    mock_client.list_files.assert_called_once_with('c1')


def test_handle_list_parts_sorted_by_sequence(mock_client):
    mock_client.list_parts.return_value = [
        FilePart(id='p1', collection_id='c1', file_id='f1', seq_id=1, bytes=10),
        FilePart(id='p0', collection_id='c1', file_id='f1', seq_id=0, bytes=1024),
    ]

    result = handle_list_parts(ListPartsCommand('c1', 'f1'), client=mock_client)

    rows = result.splitlines()[2:]
    assert rows[0].startswith('0')
    assert rows[1].startswith('1')


def test_handle_delete_file(mock_client):
    result = handle_delete_file(DeleteFileCommand('c1', 'f1'), client=mock_client)

    assert result == "Deleted file f1."
    mock_client.delete_file.assert_called_once_with('c1', 'f1')


def test_handle_upload_walks_directory(mock_client, tmp_path):
    videos = tmp_path / 'videos'
    (videos / 'day1').mkdir(parents=True)
    (videos / 'day1' / 'clip.mp4').write_bytes(b'x' * 10)
    (videos / 'intro.mp4').write_bytes(b'y' * 5)
    mock_client.upload_file.side_effect = lambda cid, remote, local, on_progress: RemoteFile(
        id='f1', collection_id=cid, path=remote, bytes=10
    )

    result = handle_upload(
        UploadCommand('c1', (str(videos),), prefix='/family'),
        client=mock_client,
        progress_factory=lambda name: None,
    )

    remote_paths = [c.args[1] for c in mock_client.upload_file.call_args_list]
    assert remote_paths == ['/family/videos/intro.mp4', '/family/videos/day1/clip.mp4']
    assert 'Uploaded: /family/videos/intro.mp4' in result


def test_handle_upload_missing_path(mock_client, tmp_path):
    with pytest.raises(ParseError, match="No such file or directory"):
        handle_upload(UploadCommand('c1', (str(tmp_path / 'nope'),)), client=mock_client)

    mock_client.upload_file.assert_not_called()


def test_handle_upload_stops_on_first_failure(mock_client, tmp_path):
    (tmp_path / 'a.bin').write_bytes(b'a')
    (tmp_path / 'b.bin').write_bytes(b'b')
    mock_client.upload_file.side_effect = RemoteError("storage unavailable", code='upload_failed')

    with pytest.raises(RemoteError):
        handle_upload(
            UploadCommand('c1', (str(tmp_path / 'a.bin'), str(tmp_path / 'b.bin'))),
            client=mock_client,
            progress_factory=lambda name: None,
        )

    assert mock_client.upload_file.call_count == 1


def test_handle_create_order(mock_client):
    mock_client.create_order.return_value = make_order()
    cmd = CreateOrderCommand(
        collection_id='c1',
        title='Summer',
        ship_to=(
            ('recipient', 'John Smith'),
            ('address1', '1 Main St.'),
            ('city', 'San Francisco'),
            ('state', 'CA'),
            ('postal_code', '94111'),
            ('phone_number', '(415) 555 1212'),
        ),
        no_disc=True,
    )

    result = handle_create_order(cmd, client=mock_client)

    assert result.startswith('Created order o1 (received)')
    mock_client.create_order.assert_called_once_with('c1', 'Summer', SHIP_TO, no_disc=True)


def test_handle_create_order_missing_fields(mock_client):
    cmd = CreateOrderCommand(collection_id='c1', title='Summer', ship_to=(('recipient', 'John Smith'),))

    with pytest.raises(ParseError, match="Missing shipping field"):
        handle_create_order(cmd, client=mock_client)

    mock_client.create_order.assert_not_called()


def test_handle_show_order(mock_client):
    mock_client.get_order.return_value = make_order()

    result = handle_show_order(ShowOrderCommand('o1'), client=mock_client)

    assert 'Order o1' in result
    assert 'John Smith / 1 Main St.' in result


def test_handle_list_orders(mock_client):
    mock_client.list_orders.return_value = [make_order()]

    result = handle_list_orders(ListOrdersCommand(), client=mock_client)

    assert 'Summer' in result
    assert '19.99' in result


def test_dispatch_command_routes_by_type(mock_client):
    mock_client.list_orders.return_value = []

    assert dispatch_command(ListOrdersCommand(), client=mock_client) == "No orders found."


def test_remote_errors_propagate(mock_client):
    mock_client.get_order.side_effect = RemoteError("Order not found", code='not_found', status_code=404)

    with pytest.raises(RemoteError, match="Order not found"):
        dispatch_command(ShowOrderCommand('missing'), client=mock_client)
