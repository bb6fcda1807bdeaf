"""
Unit tests for command message format and validation.
"""

import unittest
import time

from canvas_mindmap.message_format import (
    Message, create_response_message, validate_message, NAVIGATION_ACTIONS, VALID_ACTIONS
)


class TestMessageFormat(unittest.TestCase):
    """Test suite for message format functionality."""

    def setUp(self):
        self.test_message_data = {
            'action': 'create_child',
            'source': 'hotkey',
            'message_id': '123',
            'payload': {'canvas_id': 'c1'},
            'timestamp': int(time.time() * 1000)
        }

    def test_message_creation(self):
        message = Message(**self.test_message_data)
        self.assertEqual(message.action, 'create_child')
        self.assertEqual(message.source, 'hotkey')
        self.assertEqual(message.payload, {'canvas_id': 'c1'})
        self.assertEqual(message.status, 'pending')
        self.assertIsNone(message.error)

    def test_message_validation(self):
        """Test message validation rules.

        Verifies that:
        - Messages with all required fields pass validation
        - Missing fields, unknown actions and wrong types fail
        """
        self.assertTrue(validate_message(self.test_message_data))

        invalid_data = self.test_message_data.copy()
        del invalid_data['action']
        self.assertFalse(validate_message(invalid_data))

        invalid_data = self.test_message_data.copy()
        invalid_data['action'] = 'canvas_click'
        self.assertFalse(validate_message(invalid_data))

        invalid_data = self.test_message_data.copy()
        invalid_data['source'] = 'plugin'
        self.assertFalse(validate_message(invalid_data))

        invalid_data = self.test_message_data.copy()
        invalid_data['payload'] = 'c1'
        self.assertFalse(validate_message(invalid_data))

        invalid_data = self.test_message_data.copy()
        invalid_data['timestamp'] = True
        self.assertFalse(validate_message(invalid_data))

        self.assertFalse(validate_message('not a dict'))

    def test_navigation_actions(self):
        self.assertEqual(len(NAVIGATION_ACTIONS), 16)
        self.assertIn('free_navigate_left_until_end', VALID_ACTIONS)
        self.assertIn('navigate_up', VALID_ACTIONS)

    def test_create_and_json(self):
        message = Message.create('frontend', 'delete_node', {'canvas_id': 'c1'})
        self.assertTrue(validate_message(message.to_dict()))
        restored = Message.from_json(message.to_json())
        self.assertEqual(restored, message)

    def test_response_message_creation(self):
        original = Message(**self.test_message_data)

        success = create_response_message(original, 'completed', payload={'changed': True})
        self.assertEqual(success.action, 'create_child_response')
        self.assertEqual(success.source, 'backend')
        self.assertEqual(success.status, 'completed')
        self.assertEqual(success.payload, {'changed': True})

        failure = create_response_message(original, 'failed', error='boom')
        self.assertEqual(failure.status, 'failed')
        self.assertEqual(failure.error, 'boom')
        self.assertEqual(failure.payload, {'error': 'boom'})

    def test_from_dict_ignores_unknown_keys(self):
        data = dict(self.test_message_data, retries=3)
        message = Message.from_dict(data)
        self.assertEqual(message.canvas_id, 'c1')
        self.assertFalse(hasattr(message, 'retries'))

    def test_canvas_id_missing(self):
        message = Message.create('frontend', 'relayout', {})
        self.assertIsNone(message.canvas_id)


if __name__ == '__main__':
    unittest.main()
