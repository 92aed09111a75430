"""Test fixtures for callgen tests.

This module provides sample endpoint catalogs and the ``objects`` module the
generated packages import their object types from.
"""

import importlib
import json
import uuid

from callgen.codegen.codegen import Codegen
from callgen.config import DocumentConfig

# The endpoint every end-to-end scenario starts from
POST_MESSAGE = {
    'name': 'chat.postMessage',
    'json': 'message',
    'return': 'Message',
    'args': [
        {'name': 'text', 'type': 'string', 'comment': 'Text of the message'},
        {'name': 'channel', 'type': 'string', 'required': True},
        {'name': 'as_user', 'type': 'bool'},
        {'name': 'attachments', 'type': 'list[Attachment]'},
        {'name': 'metadata', 'type': 'Metadata'},
    ],
}

# A catalog touching every argument kind, grouping rule and response shape
SLACK_CATALOG = [
    {
        'name': 'users.list',
        'json': 'members',
        'return': 'list[User]',
        'args': [
            {'name': 'limit', 'type': 'int'},
            {'name': 'presence', 'type': 'bool'},
        ],
    },
    POST_MESSAGE,
    {
        'name': 'chat.delete',
        'args': [
            {'name': 'ts', 'type': 'string', 'required': True},
            {'name': 'channel', 'type': 'string', 'required': True},
        ],
    },
    {
        'name': 'chat.update',
        'json': 'message',
        'return': 'Message',
        'args': [
            {'name': 'channel', 'type': 'string', 'required': True},
            {'name': 'ts', 'type': 'string', 'required': True},
            {'name': 'blocks', 'type': 'BlockList'},
            {'name': 'extra', 'type': 'Broken'},
        ],
    },
    {
        'name': 'conversations.open',
        'json': 'channel',
        'return': 'Channel',
        'args': [
            {'name': 'users', 'type': 'list[string]'},
            {'name': 'return_im', 'type': 'bool', 'query_name': 'returnIm'},
        ],
    },
    {
        'name': 'dnd.setSnooze',
        'args': [{'name': 'num_minutes', 'type': 'int', 'required': True}],
    },
    {
        'name': 'im.close',
        'group': 'IM',
        'args': [{'name': 'channel', 'type': 'string', 'required': True}],
    },
    {
        'name': 'users.profile.get',
        'json': 'profile',
        'return': 'Profile',
        'args': [{'name': 'include_labels', 'type': 'bool'}],
    },
    {
        'name': 'oauth.access',
        'return': 'OAuthAccess',
        'skip_token': True,
        'args': [
            {'name': 'client_id', 'type': 'string', 'required': True},
            {'name': 'client_secret', 'type': 'string', 'required': True},
            {'name': 'code', 'type': 'string', 'required': True},
            {'name': 'redirect_uri', 'type': 'string'},
        ],
    },
]

# Object types referenced by SLACK_CATALOG; written next to generated code
OBJECTS_SOURCE = '''
import json

from pydantic import BaseModel


class Attachment(BaseModel):
    fallback: str = ''
    text: str = ''


class Block(BaseModel):
    type: str = 'section'
    text: str = ''


class BlockList(list):
    def encode(self) -> str:
        return json.dumps([block.model_dump() for block in self])


class Broken:
    def encode(self) -> str:
        raise ValueError('cannot encode this value')


class Metadata(BaseModel):
    event_type: str


class Message(BaseModel):
    text: str = ''
    ts: str = ''


class Channel(BaseModel):
    id: str


class User(BaseModel):
    id: str
    name: str = ''


class Profile(BaseModel):
    real_name: str = ''


class OAuthAccess(BaseModel):
    access_token: str = ''
    scope: str = ''
'''


def write_catalog(directory, catalog, filename='endpoints.json'):
    """Write ``catalog`` as JSON into ``directory`` and return its path."""
    path = directory / filename
    path.write_text(json.dumps(catalog))
    return path


def generate_package(directory, catalog, **config):
    """Generate a uniquely named client package from ``catalog`` and import it.

    The package is written under ``directory`` together with the fixture
    objects module; ``directory`` must already be on ``sys.path``.
    """
    name = f'generated_{uuid.uuid4().hex[:12]}'
    source = write_catalog(directory, catalog, f'{name}.json')
    output = directory / name

    Codegen(DocumentConfig(source=str(source), output=str(output), **config)).generate()
    (output / 'objects.py').write_text(OBJECTS_SOURCE)
    return importlib.import_module(name)
