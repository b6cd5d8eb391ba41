"""Test fixtures for slackgen tests.

This module provides sample method documents and utilities for loading and
exercising generated bindings.
"""

import itertools
import sys
import types

# chat.postMessage: object response with a nested object and declared errors
POST_MESSAGE_METHOD = {
    'name': 'chat.postMessage',
    'description': 'Sends a message to a channel.',
    'documentationUrl': 'https://api.slack.com/methods/chat.postMessage',
    'params': [
        {'name': 'channel', 'type': 'string', 'description': 'Channel to send to.'},
        {
            'name': 'text',
            'type': 'string',
            'optional': True,
            'description': 'Text of the message to send.',
        },
        {'name': 'as_user', 'type': 'boolean', 'optional': True},
        {'name': 'thread_ts', 'type': 'string', 'optional': True},
    ],
    'response': {
        'schema': {
            'type': 'object',
            'required': ['ok'],
            'properties': {
                'ok': {'type': 'boolean'},
                'error': {'type': 'string'},
                'channel': {
                    'type': 'string',
                    'description': 'Channel the message was posted to.',
                },
                'ts': {'type': 'string'},
                'message': {
                    'type': 'object',
                    'required': ['text'],
                    'properties': {
                        'text': {'type': 'string'},
                        'botId': {'type': 'string'},
                    },
                },
            },
        },
        'errors': [
            {'name': 'channel_not_found', 'description': 'channel_not_found'},
            {'name': 'not_in_channel', 'description': 'not_in_channel'},
        ],
    },
}

# conversations.history: boolean and integer parameters, array of objects
HISTORY_METHOD = {
    'name': 'conversations.history',
    'description': 'Fetches a conversation\'s history of messages and events.',
    'documentationUrl': 'https://api.slack.com/methods/conversations.history',
    'params': [
        {'name': 'channel', 'type': 'string'},
        {'name': 'inclusive', 'type': 'boolean'},
        {'name': 'limit', 'type': 'integer', 'optional': True},
        {'name': 'oldest', 'type': 'string', 'optional': True},
    ],
    'response': {
        'schema': {
            'type': 'object',
            'required': ['ok'],
            'properties': {
                'ok': {'type': 'boolean'},
                'error': {'type': 'string'},
                'has_more': {'type': 'boolean'},
                'messages': {
                    'type': 'array',
                    'items': {
                        'type': 'object',
                        'required': ['ts'],
                        'properties': {
                            'ts': {'type': 'string'},
                            'text': {'type': 'string'},
                        },
                    },
                },
            },
        },
        'errors': [{'name': 'channel_not_found', 'description': 'channel_not_found'}],
    },
}

# reactions.get: a nested "message" enum, discriminated by "subtype"
REACTIONS_GET_METHOD = {
    'name': 'reactions.get',
    'description': 'Gets reactions for an item.',
    'documentationUrl': 'https://api.slack.com/methods/reactions.get',
    'params': [
        {'name': 'channel', 'type': 'string', 'optional': True},
        {'name': 'timestamp', 'type': 'string', 'optional': True},
        {'name': 'full', 'type': 'boolean', 'optional': True},
    ],
    'response': {
        'schema': {
            'type': 'object',
            'required': ['ok'],
            'properties': {
                'ok': {'type': 'boolean'},
                'error': {'type': 'string'},
                'channel': {'type': 'string'},
                'message': {
                    'oneOf': [
                        {
                            'title': 'bot_message',
                            'type': 'object',
                            'required': ['bot_id'],
                            'properties': {
                                'bot_id': {'type': 'string'},
                                'text': {'type': 'string'},
                                'icons': {
                                    'type': 'object',
                                    'additionalProperties': {'type': 'string'},
                                },
                            },
                        },
                        {
                            'title': 'me_message',
                            'type': 'object',
                            'required': ['user'],
                            'properties': {
                                'user': {'type': 'string'},
                                'text': {'type': 'string'},
                            },
                        },
                    ]
                },
            },
        },
        'errors': [{'name': 'message_not_found', 'description': 'message_not_found'}],
    },
}

# bots.info: the top-level response is an enum whose variants all carry "ok"
BOTS_INFO_METHOD = {
    'name': 'bots.info',
    'description': 'Gets information about a bot user.',
    'params': [{'name': 'bot', 'type': 'string'}],
    'response': {
        'schema': {
            'oneOf': [
                {
                    'title': 'found',
                    'type': 'object',
                    'required': ['ok', 'id'],
                    'properties': {
                        'ok': {'type': 'boolean'},
                        'id': {'type': 'string'},
                    },
                },
                {
                    'title': 'missing',
                    'type': 'object',
                    'required': ['ok'],
                    'properties': {
                        'ok': {'type': 'boolean'},
                        'error': {'type': 'string'},
                    },
                },
            ]
        },
        'errors': [{'name': 'bot_not_found', 'description': 'bot_not_found'}],
    },
}

# api.test: a response without "ok" gets no result facade
NO_OK_METHOD = {
    'name': 'api.test',
    'params': [],
    'response': {
        'schema': {
            'type': 'object',
            'properties': {'args': {'type': 'object'}},
        }
    },
}

# Top-level response that is not an object
ARRAY_RESPONSE_METHOD = {
    'name': 'broken.list',
    'response': {'schema': {'type': 'array', 'items': {'type': 'string'}}},
}

# Top-level enum with a variant that cannot report success
ENUM_WITHOUT_OK_METHOD = {
    'name': 'broken.choice',
    'response': {
        'schema': {
            'oneOf': [
                {
                    'title': 'good',
                    'type': 'object',
                    'properties': {'ok': {'type': 'boolean'}},
                },
                {
                    'title': 'bad',
                    'type': 'object',
                    'properties': {'value': {'type': 'string'}},
                },
            ]
        }
    },
}


def module_document(name: str, *methods: dict, description: str | None = None) -> dict:
    """Build a module document holding the given method documents."""
    return {'name': name, 'description': description, 'methods': list(methods)}


_counter = itertools.count()


def load_generated(source: str) -> types.ModuleType:
    """Execute generated source as a fresh, importable module."""
    name = f'slackgen_generated_{next(_counter)}'
    module = types.ModuleType(name)
    sys.modules[name] = module
    exec(compile(source, f'<{name}>', 'exec'), module.__dict__)
    return module


class FakeSender:
    """A RequestSender returning a canned body and recording every call."""

    def __init__(self, body: str = '{"ok": true}', error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls: list[tuple[str, dict[str, str]]] = []

    def send(self, method: str, params: dict[str, str]) -> str:
        self.calls.append((method, params))
        if self.error is not None:
            raise self.error
        return self.body
